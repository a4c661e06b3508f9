#!/usr/bin/env python3
"""CLI entry point for the bank statement parser."""

import os
import sys
import argparse
import subprocess
from pathlib import Path
from dotenv import load_dotenv
from loguru import logger
from rich.console import Console
from rich.table import Table

from statement_parser.csv_writer import write_statement
from statement_parser.models import ScanState
from statement_parser.pdf_processor import ENGINES, PDFProcessor
from statement_parser.scanner import DocumentScanner, MalformedStatementError


def is_scan_trace(record) -> bool:
    """Phase transitions logged by the scanner carry the line they happened on."""
    return "scan_line" in record["extra"]


def setup_logging(verbose: bool = False, log_dir: Path = Path("logs")):
    """
    Configure logging.

    Sinks:
        stderr: run progress; phase transitions too with ``verbose``
        statement_parser.log: everything except phase transitions
        scan_trace.log: one row per phase transition, keyed by input line
    """
    logger.remove()

    # Console logging
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
               "<cyan>{module}</cyan> | <level>{message}</level>",
        level="DEBUG" if verbose else "INFO",
        colorize=True
    )

    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_dir / "statement_parser.log",
        rotation="10 MB",
        retention="7 days",
        level="DEBUG",
        filter=lambda record: not is_scan_trace(record),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {module}:{function}:{line} | {message}"
    )

    # Phase trace, so a malformed statement can be matched against its text
    logger.add(
        log_dir / "scan_trace.log",
        mode="w",
        level="DEBUG",
        filter=is_scan_trace,
        format="line {extra[scan_line]: >6} | {extra[scan_phase]: <24} | {message}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract credits and debits from a bank statement PDF into CSV files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python parse_statement.py statement.pdf
  python parse_statement.py statement.pdf --output-dir out --document-order
  python parse_statement.py statement.txt --text --strict --verbose
        """
    )

    parser.add_argument(
        "input",
        type=str,
        help="Statement PDF (or extracted text with --text)"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for credits.csv and debits.csv "
             "(default: $STATEMENT_OUTPUT_DIR or the current directory)"
    )

    parser.add_argument(
        "--engine",
        choices=ENGINES,
        default="pdftotext",
        help="Text extraction engine (default: pdftotext)"
    )

    parser.add_argument(
        "--text",
        action="store_true",
        help="Input is already-extracted statement text; skip PDF extraction"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Only accept transaction lines whose description runs to the end of the line"
    )

    parser.add_argument(
        "--document-order",
        action="store_true",
        help="Write rows in document order instead of most-recent-first"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser


def load_text(args) -> str:
    """Read statement text from the input file or extract it from the PDF."""
    if args.text:
        logger.info(f"Reading statement text from {args.input}")
        return Path(args.input).read_text(encoding="utf-8")
    return PDFProcessor(engine=args.engine).extract_text(args.input)


def display_results(state: ScanState, paths, console: Console):
    """Display a summary of the exported transactions."""
    table = Table(title="Statement Export", show_header=True, header_style="bold magenta")
    table.add_column("Section", style="cyan")
    table.add_column("Transactions", style="green", justify="right")
    table.add_column("File", style="yellow")

    table.add_row("Credits", str(len(state.credits)), str(paths[0]))
    table.add_row("Debits", str(len(state.debits)), str(paths[1]))

    console.print(table)


def main(argv=None):
    """Main CLI function."""
    load_dotenv()

    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)
    console = Console()

    output_dir = args.output_dir or os.getenv("STATEMENT_OUTPUT_DIR") or "."

    try:
        text = load_text(args)
        state = DocumentScanner(strict=args.strict).scan(text)
        paths = write_statement(state, output_dir, document_order=args.document_order)

    except MalformedStatementError as e:
        console.print(f"[red]Malformed statement:[/red] {e}")
        console.print("[yellow]Phase trace:[/yellow] logs/scan_trace.log")
        sys.exit(1)
    except UnicodeDecodeError as e:
        console.print(f"[red]Statement text is not UTF-8:[/red] {e}")
        sys.exit(1)
    except subprocess.CalledProcessError as e:
        console.print(f"[red]Text extraction failed:[/red] {e}")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    display_results(state, paths, console)
    sys.exit(0)


if __name__ == "__main__":
    main()
