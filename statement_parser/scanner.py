"""Line-by-line state machine that folds a statement into credits and debits."""

from typing import Callable, Dict, Optional, Tuple
from loguru import logger

from . import grammar
from .models import ScanPhase, ScanState, Transaction


class MalformedStatementError(ValueError):
    """The input ended before the scan reached ``ScanPhase.DONE``."""

    def __init__(self, phase: ScanPhase, line_number: int):
        self.phase = phase
        self.line_number = line_number
        super().__init__(
            f"Statement ended in phase '{phase.value}' after line {line_number} "
            f"without reaching '{ScanPhase.DONE.value}'"
        )


# Phases that look for a single marker line: recognizer, phase on success.
# On failure they stay put.
SEARCH_PHASES: Dict[ScanPhase, Tuple[Callable, ScanPhase]] = {
    ScanPhase.SEARCHING_CREDIT_TITLE: (grammar.credit_title, ScanPhase.SEARCHING_CREDIT_HEADER),
    ScanPhase.SEARCHING_CREDIT_HEADER: (grammar.header, ScanPhase.SCANNING_CREDITS),
    ScanPhase.SEARCHING_DEBIT_TITLE: (grammar.debit_title, ScanPhase.SEARCHING_DEBIT_HEADER),
    ScanPhase.SEARCHING_DEBIT_HEADER: (grammar.header, ScanPhase.SCANNING_DEBITS),
}

# Phases that collect transactions: phase entered on the first non-match.
SCANNING_PHASES: Dict[ScanPhase, ScanPhase] = {
    ScanPhase.SCANNING_CREDITS: ScanPhase.SEARCHING_DEBIT_TITLE,
    ScanPhase.SCANNING_DEBITS: ScanPhase.DONE,
}


def transition(
    phase: ScanPhase,
    line: str,
    strict: bool = False
) -> Tuple[ScanPhase, Optional[Transaction]]:
    """
    Apply the recognizer for ``phase`` to ``line``.

    Args:
        phase: Phase active before the line
        line: One line of statement text
        strict: Passed through to the transaction recognizer

    Returns:
        Tuple of (next_phase, transaction). The transaction is set only when
        a scanning phase recognized one.
    """
    if phase in SEARCH_PHASES:
        recognize, on_success = SEARCH_PHASES[phase]
        if recognize(line) is not None:
            return on_success, None
        return phase, None

    if phase in SCANNING_PHASES:
        recognized = grammar.transaction(line, strict=strict)
        if recognized is not None:
            return phase, recognized.value
        return SCANNING_PHASES[phase], None

    raise ValueError(f"No transition out of phase '{phase.value}'")


class DocumentScanner:
    """Scan statement text one line at a time into a ScanState."""

    def __init__(self, strict: bool = False):
        """
        Initialize the scanner.

        Args:
            strict: Reject transaction lines whose description does not reach
                the end of the line
        """
        self.strict = strict
        self.state = ScanState()
        self.line_number = 0

    @property
    def phase(self) -> ScanPhase:
        return self.state.phase

    def feed(self, line: str) -> ScanPhase:
        """Consume one line and return the phase that follows it."""
        phase = self.state.phase
        self.line_number += 1

        next_phase, txn = transition(phase, line, strict=self.strict)

        if txn is not None:
            if phase is ScanPhase.SCANNING_CREDITS:
                self.state.credits.insert(0, txn)
            else:
                self.state.debits.insert(0, txn)

        if next_phase is not phase:
            logger.bind(scan_line=self.line_number, scan_phase=phase.value).debug(
                f"Line {self.line_number}: {phase.value} -> {next_phase.value}"
            )

        self.state.phase = next_phase
        return next_phase

    def scan(self, text: str) -> ScanState:
        """
        Scan a whole statement.

        Lines are split on ``"\\n"`` only; text ending in a newline therefore
        ends with an empty line. Scanning stops at the first line that takes
        the scanner to ``DONE``.

        Args:
            text: Layout-preserving statement text

        Returns:
            Final ScanState, with credits and debits in reverse document order

        Raises:
            MalformedStatementError: If the text runs out before ``DONE``
        """
        self.state = ScanState()
        self.line_number = 0

        for line in text.split("\n"):
            if self.feed(line) is ScanPhase.DONE:
                logger.info(
                    f"Scan complete at line {self.line_number}: "
                    f"{len(self.state.credits)} credits, {len(self.state.debits)} debits"
                )
                return self.state

        error = MalformedStatementError(self.state.phase, self.line_number)
        logger.error(str(error))
        raise error


def scan_statement(text: str, strict: bool = False) -> ScanState:
    """Scan ``text`` with a fresh DocumentScanner."""
    return DocumentScanner(strict=strict).scan(text)
