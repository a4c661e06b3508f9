"""CSV export of scanned credits and debits."""

import pandas as pd
from pathlib import Path
from typing import List, Sequence, Tuple, Union
from loguru import logger

from .models import ScanState, Transaction


COLUMNS = ["Date", "Amount", "Description"]

CREDITS_FILENAME = "credits.csv"
DEBITS_FILENAME = "debits.csv"


def transactions_to_dataframe(
    transactions: Sequence[Transaction],
    document_order: bool = False
) -> pd.DataFrame:
    """
    Convert transactions to a DataFrame of strings.

    Args:
        transactions: Transactions as accumulated by the scanner
        document_order: Reverse the accumulated order back to document order

    Returns:
        DataFrame with Date, Amount and Description columns
    """
    rows: List[List[str]] = [txn.as_row() for txn in transactions]
    if document_order:
        rows.reverse()
    return pd.DataFrame(rows, columns=COLUMNS, dtype=str)


def write_transactions(
    transactions: Sequence[Transaction],
    output_path: Union[str, Path],
    document_order: bool = False
) -> Path:
    """Write one transaction list as CSV and return the written path."""
    output_path = Path(output_path)
    df = transactions_to_dataframe(transactions, document_order=document_order)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(output_path, index=False, lineterminator="\n")
    except OSError as e:
        logger.error(f"Failed to write {output_path}: {e}")
        raise

    logger.info(f"Wrote {len(df)} transactions to {output_path}")
    return output_path


def write_statement(
    state: ScanState,
    output_dir: Union[str, Path] = ".",
    document_order: bool = False
) -> Tuple[Path, Path]:
    """
    Write credits.csv and debits.csv for a finished scan.

    Args:
        state: ScanState returned by the scanner
        output_dir: Directory to write into (created if missing)
        document_order: Write rows in document order instead of accumulated order

    Returns:
        Tuple of (credits_path, debits_path)
    """
    if not state.is_done:
        raise ValueError(f"Cannot export an unfinished scan (phase '{state.phase.value}')")

    output_dir = Path(output_dir)
    credits_path = write_transactions(
        state.credits, output_dir / CREDITS_FILENAME, document_order=document_order
    )
    debits_path = write_transactions(
        state.debits, output_dir / DEBITS_FILENAME, document_order=document_order
    )
    return credits_path, debits_path
