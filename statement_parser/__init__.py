"""Bank statement parser.

Turns the layout-preserving text of a statement PDF into credit and debit
transaction lists:

    text = PDFProcessor().extract_text("statement.pdf")
    state = scan_statement(text)
    write_statement(state, "out/")
"""

from .models import ScanPhase, ScanState, Transaction
from .scanner import DocumentScanner, MalformedStatementError, scan_statement, transition
from .pdf_processor import PDFProcessor
from .csv_writer import write_statement

__all__ = [
    "DocumentScanner",
    "MalformedStatementError",
    "PDFProcessor",
    "ScanPhase",
    "ScanState",
    "Transaction",
    "scan_statement",
    "transition",
    "write_statement",
]
