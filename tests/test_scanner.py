"""Tests for the statement scanning state machine."""

import sys
import pytest
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from statement_parser.models import ScanPhase, ScanState, Transaction
from statement_parser.scanner import (
    DocumentScanner,
    MalformedStatementError,
    scan_statement,
    transition,
)


STATEMENT_LINES = [
    "  3 DEPOSITS/CREDITS",
    " Date  Amount  Description",
    " 04/15 123.45 Groceries",
    " 04/16 20.00 Gas",
    "",
    " 2 CHARGES/DEBITS",
    " Date Amount Description",
    " 04/17 50.00 Rent",
    "",
]

STATEMENT_TEXT = "\n".join(STATEMENT_LINES)

LAYOUT_STATEMENT = """\
                      ZIONS BANK                      Statement Period
                                                      03/16 - 04/15
  Account Summary
      Beginning balance                 1,000.00

  3 DEPOSITS/CREDITS
      Date        Amount       Description
      03/18       1,250.00     PAYROLL ACME CORP
      04/01          42.10     REFUND, ONLINE STORE #1188

  4 CHARGES/DEBITS
      Date        Amount       Description
      03/20         600.00     RENT APT 4B
      03/22          18.75     COFFEE SHOP "THE BEAN"
      04/02           9.99     STREAMING SERVICE
  5 DAILY BALANCE SUMMARY
      03/20         650.00
"""


def txn(date, amount, description):
    return Transaction(date=date, amount=amount, description=description)


class TestTransition:
    """Tests for the pure per-line transition."""

    @pytest.mark.parametrize("number", ["0", "1", "3", "12", "9999"])
    def test_credit_title_advances_regardless_of_number(self, number):
        line = f"  {number} DEPOSITS/CREDITS"
        assert transition(ScanPhase.SEARCHING_CREDIT_TITLE, line) == (
            ScanPhase.SEARCHING_CREDIT_HEADER, None
        )

    @pytest.mark.parametrize("phase, line, expected", [
        (ScanPhase.SEARCHING_CREDIT_TITLE, "Account Summary", ScanPhase.SEARCHING_CREDIT_TITLE),
        (ScanPhase.SEARCHING_CREDIT_TITLE, " Date Amount Description", ScanPhase.SEARCHING_CREDIT_TITLE),
        (ScanPhase.SEARCHING_CREDIT_HEADER, " Date Amount Description", ScanPhase.SCANNING_CREDITS),
        (ScanPhase.SEARCHING_CREDIT_HEADER, "", ScanPhase.SEARCHING_CREDIT_HEADER),
        (ScanPhase.SCANNING_CREDITS, "", ScanPhase.SEARCHING_DEBIT_TITLE),
        (ScanPhase.SEARCHING_DEBIT_TITLE, " 2 CHARGES/DEBITS", ScanPhase.SEARCHING_DEBIT_HEADER),
        (ScanPhase.SEARCHING_DEBIT_TITLE, "  3 DEPOSITS/CREDITS", ScanPhase.SEARCHING_DEBIT_TITLE),
        (ScanPhase.SEARCHING_DEBIT_TITLE, " 04/15 1.00 Late", ScanPhase.SEARCHING_DEBIT_TITLE),
        (ScanPhase.SEARCHING_CREDIT_TITLE, "  3   DEPOSITS/CREDITS", ScanPhase.SEARCHING_CREDIT_TITLE),
        (ScanPhase.SEARCHING_DEBIT_TITLE, " 2   CHARGES/DEBITS", ScanPhase.SEARCHING_DEBIT_TITLE),
        (ScanPhase.SEARCHING_DEBIT_HEADER, "Date Amount Description", ScanPhase.SCANNING_DEBITS),
        (ScanPhase.SEARCHING_DEBIT_HEADER, " 04/15 1.00 Early", ScanPhase.SEARCHING_DEBIT_HEADER),
        (ScanPhase.SCANNING_DEBITS, "Page 2 of 2", ScanPhase.DONE),
    ])
    def test_marker_and_block_end_transitions(self, phase, line, expected):
        next_phase, recognized = transition(phase, line)
        assert next_phase is expected
        assert recognized is None

    @pytest.mark.parametrize("phase", [ScanPhase.SCANNING_CREDITS, ScanPhase.SCANNING_DEBITS])
    def test_scanning_phase_yields_transaction(self, phase):
        assert transition(phase, " 04/15 123.45 Groceries") == (
            phase, txn("04/15", "123.45", "Groceries")
        )

    def test_strict_comma_line_ends_block(self):
        line = " 04/15 5.00 Coffee, Shop"
        assert transition(ScanPhase.SCANNING_CREDITS, line)[1] == txn("04/15", "5.00", "Coffee")
        assert transition(ScanPhase.SCANNING_CREDITS, line, strict=True) == (
            ScanPhase.SEARCHING_DEBIT_TITLE, None
        )

    def test_done_has_no_transition(self):
        with pytest.raises(ValueError):
            transition(ScanPhase.DONE, " 04/15 123.45 Groceries")


class TestDocumentScanner:
    """Tests for scanning whole documents."""

    def test_two_section_statement(self):
        state = scan_statement(STATEMENT_TEXT)

        assert state.phase is ScanPhase.DONE
        assert state.is_done
        assert state.credits == [txn("04/16", "20.00", "Gas"), txn("04/15", "123.45", "Groceries")]
        assert state.debits == [txn("04/17", "50.00", "Rent")]

    def test_layout_statement(self):
        state = scan_statement(LAYOUT_STATEMENT)

        assert state.credits == [
            txn("04/01", "42.10", "REFUND"),
            txn("03/18", "1250.00", "PAYROLL ACME CORP"),
        ]
        assert state.debits == [
            txn("04/02", "9.99", "STREAMING SERVICE"),
            txn("03/22", "18.75", 'COFFEE SHOP "THE BEAN"'),
            txn("03/20", "600.00", "RENT APT 4B"),
        ]

    def test_stops_at_done(self):
        scanner = DocumentScanner()
        trailing = STATEMENT_TEXT + "\n 04/18 75.00 Not a debit\n"
        state = scanner.scan(trailing)

        assert scanner.line_number == len(STATEMENT_LINES)
        assert state.debits == [txn("04/17", "50.00", "Rent")]

    def test_feed_reports_phases(self):
        scanner = DocumentScanner()
        phases = [scanner.feed(line) for line in STATEMENT_LINES]

        assert phases == [
            ScanPhase.SEARCHING_CREDIT_HEADER,
            ScanPhase.SCANNING_CREDITS,
            ScanPhase.SCANNING_CREDITS,
            ScanPhase.SCANNING_CREDITS,
            ScanPhase.SEARCHING_DEBIT_TITLE,
            ScanPhase.SEARCHING_DEBIT_HEADER,
            ScanPhase.SCANNING_DEBITS,
            ScanPhase.SCANNING_DEBITS,
            ScanPhase.DONE,
        ]
        assert scanner.phase is ScanPhase.DONE

    def test_no_return_to_credits(self):
        lines = STATEMENT_LINES[:5] + [
            "  4 DEPOSITS/CREDITS",
            " Date Amount Description",
            " 04/20 1.00 Ignored",
        ] + STATEMENT_LINES[5:]
        state = scan_statement("\n".join(lines))

        assert len(state.credits) == 2
        assert state.debits == [txn("04/17", "50.00", "Rent")]

    def test_strict_mode_ends_block_at_comma(self):
        lines = list(STATEMENT_LINES)
        lines[3] = " 04/16 20.00 Gas, Station 9"
        state = DocumentScanner(strict=True).scan("\n".join(lines))

        assert state.credits == [txn("04/15", "123.45", "Groceries")]
        assert state.debits == [txn("04/17", "50.00", "Rent")]

    def test_empty_sections(self):
        text = "1 DEPOSITS/CREDITS\nDate Amount Description\n\n2 CHARGES/DEBITS\nDate Amount Description\n"
        state = scan_statement(text)

        assert state == ScanState(phase=ScanPhase.DONE)

    def test_idempotent(self):
        scanner = DocumentScanner()
        first = scanner.scan(LAYOUT_STATEMENT)
        second = scanner.scan(LAYOUT_STATEMENT)

        assert first == second
        assert first is not second
        assert scan_statement(LAYOUT_STATEMENT) == first


class TestMalformedStatement:
    """Tests for documents that never reach the terminal phase."""

    def test_ends_while_scanning_debits(self):
        text = "\n".join(STATEMENT_LINES[:-1])

        with pytest.raises(MalformedStatementError) as exc_info:
            scan_statement(text)

        assert exc_info.value.phase is ScanPhase.SCANNING_DEBITS
        assert exc_info.value.line_number == 8
        assert "line 8" in str(exc_info.value)

    def test_no_credit_title(self):
        text = "\n".join(STATEMENT_LINES[1:])

        with pytest.raises(MalformedStatementError) as exc_info:
            scan_statement(text)

        assert exc_info.value.phase is ScanPhase.SEARCHING_CREDIT_TITLE
        assert exc_info.value.line_number == len(STATEMENT_LINES) - 1

    def test_no_debit_section(self):
        with pytest.raises(MalformedStatementError) as exc_info:
            scan_statement("\n".join(STATEMENT_LINES[:5]))

        assert exc_info.value.phase is ScanPhase.SEARCHING_DEBIT_TITLE

    def test_empty_text(self):
        with pytest.raises(MalformedStatementError) as exc_info:
            scan_statement("")

        assert exc_info.value.phase is ScanPhase.SEARCHING_CREDIT_TITLE
        assert exc_info.value.line_number == 1

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            scan_statement("nothing to see here")
