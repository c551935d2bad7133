# app/services/numbering.py
#
# Invoice Numbering
# Next number = highest existing "INV-<n>" + 1, zero-padded to four digits.
# This is scan-then-assign: two concurrent creates can pick the same number,
# in which case the UNIQUE constraint on invoices.invoice_number rejects the
# second insert (surfaced as DuplicateKeyError).

from typing import Iterable

from sqlalchemy.orm import Session

from models import Invoice

INVOICE_PREFIX = "INV-"


def parse_invoice_sequence(invoice_number: str | None) -> int:
    """
    Numeric suffix of an "INV-<n>" number.
    Anything that doesn't match (other prefix, non-numeric suffix) counts as 0.
    """
    if not invoice_number or not invoice_number.startswith(INVOICE_PREFIX):
        return 0
    suffix = invoice_number[len(INVOICE_PREFIX):]
    if not suffix.isdigit():
        return 0
    return int(suffix)


def format_invoice_number(sequence: int) -> str:
    return f"{INVOICE_PREFIX}{sequence:04d}"


def next_invoice_number(existing_numbers: Iterable[str | None]) -> str:
    highest = max((parse_invoice_sequence(n) for n in existing_numbers), default=0)
    return format_invoice_number(highest + 1)


def generate_invoice_number(db: Session) -> str:
    """Scan stored invoice numbers and return the next free one."""
    rows = db.query(Invoice.invoice_number).all()
    return next_invoice_number(row[0] for row in rows)
