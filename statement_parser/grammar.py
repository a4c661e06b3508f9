"""Line recognizers for the layout-preserving text of a bank statement PDF.

Grammar, one rule per recognizer. ``[chars]`` is a regex style character
class and ``' '*`` is a run of zero or more spaces. Nothing is required to
consume the whole line; the unmatched tail is handed back to the caller.

    date          ::= [0-9]{2} "/" [0-9]{2}
    amount        ::= ([0-9]{1,3} ",")? [0-9]{1,3} "." [0-9]{2}
    description   ::= [\\x20-\\x7e excluding ","]+
    credit_title  ::= ' '* [0-9]+ ' ' "DEPOSITS/CREDITS"
    debit_title   ::= ' '* [0-9]+ ' ' "CHARGES/DEBITS"
    header        ::= ' '* "Date" ' '* "Amount" ' '* "Description"
    transaction   ::= ' '* date ' '* amount ' '* description

The comma in ``amount`` is consumed but dropped from the value. A comma is
never part of a ``description``, so a description is cut short at its first
comma.
"""

import re
from typing import NamedTuple, Optional, Tuple, Any

from .models import Transaction


class Recognized(NamedTuple):
    """Successful recognition: the extracted value and the unconsumed tail."""
    value: Any
    rest: str


###############################################################################
# Rules.

SPACES_RULE = r' *'

TWO_DIGITS_RULE = r'[0-9]{2}'

DATE_RULE = r'(' + TWO_DIGITS_RULE + r'/' + TWO_DIGITS_RULE + r')'

# Optional thousands group, integer part, fraction. The comma stays outside
# the capture groups.
AMOUNT_RULE = r'(?:([0-9]{1,3}),)?([0-9]{1,3})\.([0-9]{2})'

# Printable ASCII minus the comma (0x2c).
DESCRIPTION_CHARS = r'\x20-\x2b\x2d-\x7e'

DESCRIPTION_RULE = r'([' + DESCRIPTION_CHARS + r']+)'

# Within a transaction the description follows a space skip. Starting it on a
# non-space keeps the skip from giving spaces back to the description.
TRAILING_DESCRIPTION_RULE = r'([\x21-\x2b\x2d-\x7e][' + DESCRIPTION_CHARS + r']*)'

CREDIT_TITLE_RULE = SPACES_RULE + r'([0-9]+) (DEPOSITS/CREDITS)'

DEBIT_TITLE_RULE = SPACES_RULE + r'[0-9]+ (CHARGES/DEBITS)'

HEADER_RULE = SPACES_RULE + r'(Date)' \
            + SPACES_RULE + r'(Amount)' \
            + SPACES_RULE + r'(Description)'

TRANSACTION_RULE = SPACES_RULE + DATE_RULE \
                 + SPACES_RULE + AMOUNT_RULE \
                 + SPACES_RULE + TRAILING_DESCRIPTION_RULE

date_engine = re.compile(DATE_RULE)
amount_engine = re.compile(AMOUNT_RULE)
description_engine = re.compile(DESCRIPTION_RULE)
credit_title_engine = re.compile(CREDIT_TITLE_RULE)
debit_title_engine = re.compile(DEBIT_TITLE_RULE)
header_engine = re.compile(HEADER_RULE)
transaction_engine = re.compile(TRANSACTION_RULE)


###############################################################################
# Recognizers.

def _join_amount(thousands: Optional[str], units: str, cents: str) -> str:
    return (thousands or "") + units + "." + cents


def date(line: str) -> Optional[Recognized]:
    """Recognize a ``MM/DD`` date at the start of ``line``."""
    match = date_engine.match(line)
    if match is None:
        return None
    return Recognized(match.group(1), line[match.end():])


def amount(line: str) -> Optional[Recognized]:
    """
    Recognize a monetary amount at the start of ``line``.

    The thousands separator is removed: ``"1,234.56"`` yields ``"1234.56"``.

    Args:
        line: Text to inspect

    Returns:
        Recognized amount string, or None
    """
    match = amount_engine.match(line)
    if match is None:
        return None
    return Recognized(_join_amount(*match.groups()), line[match.end():])


def description(line: str) -> Optional[Recognized]:
    """Recognize free text up to (not including) the first comma."""
    match = description_engine.match(line)
    if match is None:
        return None
    return Recognized(match.group(1), line[match.end():])


def credit_title(line: str) -> Optional[Recognized]:
    """
    Recognize the title line of the deposits/credits section.

    Returns:
        Recognized ``(section_number, "DEPOSITS/CREDITS")``, or None
    """
    match = credit_title_engine.match(line)
    if match is None:
        return None
    return Recognized((int(match.group(1)), match.group(2)), line[match.end():])


def debit_title(line: str) -> Optional[Recognized]:
    """Recognize the title line of the charges/debits section.

    The leading section number is consumed and dropped.
    """
    match = debit_title_engine.match(line)
    if match is None:
        return None
    return Recognized(match.group(1), line[match.end():])


def header(line: str) -> Optional[Recognized]:
    """Recognize the ``Date Amount Description`` column header line."""
    match = header_engine.match(line)
    if match is None:
        return None
    columns: Tuple[str, str, str] = match.groups()
    return Recognized(columns, line[match.end():])


def transaction(line: str, strict: bool = False) -> Optional[Recognized]:
    """
    Recognize a transaction line: date, amount and description in order.

    By default only a matching prefix is required, so a description holding
    a comma is truncated and the rest of the line is left in ``rest``. With
    ``strict`` the description must run to the end of the line.

    Args:
        line: Text to inspect
        strict: Require the whole line to be consumed

    Returns:
        Recognized Transaction, or None
    """
    match = transaction_engine.match(line)
    if match is None:
        return None

    rest = line[match.end():]
    if strict and rest:
        return None

    txn_date, thousands, units, cents, txn_description = match.groups()
    return Recognized(
        Transaction(
            date=txn_date,
            amount=_join_amount(thousands, units, cents),
            description=txn_description,
        ),
        rest,
    )
