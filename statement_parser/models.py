"""Pydantic models for parsed statement data."""

from pydantic import BaseModel, ConfigDict, Field
from typing import List
from enum import Enum


class ScanPhase(str, Enum):
    """Scanner phase enumeration, in the order the phases are visited."""
    SEARCHING_CREDIT_TITLE = "searching_credit_title"
    SEARCHING_CREDIT_HEADER = "searching_credit_header"
    SCANNING_CREDITS = "scanning_credits"
    SEARCHING_DEBIT_TITLE = "searching_debit_title"
    SEARCHING_DEBIT_HEADER = "searching_debit_header"
    SCANNING_DEBITS = "scanning_debits"
    DONE = "done"


class Transaction(BaseModel):
    """One recognized statement line."""
    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="Month/day as MM/DD")
    amount: str = Field(..., description="Amount without thousands separator")
    description: str = Field(..., min_length=1, description="Free text, never contains a comma")

    def as_row(self) -> List[str]:
        """Return the transaction as a Date, Amount, Description row."""
        return [self.date, self.amount, self.description]

    def __str__(self) -> str:
        return f"{self.description}@{self.date} ({self.amount})"


class ScanState(BaseModel):
    """Running result threaded through the scan.

    Transactions are prepended as they are recognized, so both lists end up
    in reverse document order.
    """
    phase: ScanPhase = ScanPhase.SEARCHING_CREDIT_TITLE
    credits: List[Transaction] = Field(default_factory=list)
    debits: List[Transaction] = Field(default_factory=list)

    @property
    def is_done(self) -> bool:
        return self.phase is ScanPhase.DONE
