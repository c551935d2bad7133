# app/services/invoices.py
#
# Invoice write path.
# create / update: validate -> recompute item totals, subtotal, tax, total
# -> apply the overdue rule -> assign a number (create only, when missing)
# -> persist. mark_invoice_paid moves an invoice to "paid" and, unless told
# not to, records the matching income transaction in the same commit.

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import DuplicateKeyError, NotFoundError
from app.services.calculations import compute_invoice_totals
from app.services.numbering import generate_invoice_number
from app.services.status_policy import (
    OVERDUE,
    PAID,
    apply_overdue,
    ensure_payable,
    payment_transaction_fields,
)
from app.services.transactions import build_transaction
from app.services.validation import validate_invoice
from models import Invoice, InvoiceItem, Transaction, utc_now

logger = logging.getLogger(__name__)

INVOICE_FIELDS = (
    "invoice_number",
    "client_name",
    "client_email",
    "client_address",
    "tax_rate",
    "issue_date",
    "due_date",
    "status",
    "payment_date",
    "notes",
)

ITEM_FIELDS = ("description", "quantity", "price")


def prepare_invoice(data: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """
    Validate an invoice record, recompute its totals and apply the overdue rule.

    Pure: no database access. Running it again on its own output gives the
    same subtotal / tax / total / status.
    """
    record = validate_invoice(data)

    totals = compute_invoice_totals(record["items"], record["tax_rate"])
    record["items"] = totals.items
    record["subtotal"] = totals.subtotal
    record["tax"] = totals.tax
    record["total"] = totals.total

    return apply_overdue(record, now)


def _items_from(invoice: Invoice) -> List[Dict[str, Any]]:
    return [{field: getattr(item, field) for field in ITEM_FIELDS} for item in invoice.items]


def _apply(invoice: Invoice, record: Dict[str, Any], replace_items: bool) -> None:
    for field in INVOICE_FIELDS + ("subtotal", "tax", "total"):
        if field in record:
            setattr(invoice, field, record[field])

    if replace_items:
        invoice.items = [
            InvoiceItem(
                position=position,
                description=item["description"],
                quantity=item["quantity"],
                price=item["price"],
                total=item["total"],
            )
            for position, item in enumerate(record["items"])
        ]
    else:
        for item, priced in zip(invoice.items, record["items"]):
            item.total = priced["total"]


def _commit(db: Session) -> None:
    """Commit, turning an invoice-number collision into DuplicateKeyError."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if "invoice_number" in str(exc.orig):
            raise DuplicateKeyError("invoiceNumber") from exc
        raise


# ---- Queries ----

def list_invoices(
    db: Session,
    status: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> List[Invoice]:
    """Invoices matching the filters (date range applies to issue_date), newest first."""
    query = db.query(Invoice)
    if status:
        query = query.filter(Invoice.status == status)
    if start is not None:
        query = query.filter(Invoice.issue_date >= start)
    if end is not None:
        query = query.filter(Invoice.issue_date < end)
    return query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()


def get_invoice(db: Session, invoice_id: int) -> Invoice:
    invoice = db.get(Invoice, invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice")
    return invoice


# ---- Writes ----

def create_invoice(db: Session, data: Dict[str, Any], now: Optional[datetime] = None) -> Invoice:
    now = now or utc_now()

    data = dict(data)
    if data.get("issue_date") is None:
        data["issue_date"] = now

    record = prepare_invoice(data, now)

    if not record.get("invoice_number"):
        record["invoice_number"] = generate_invoice_number(db)

    invoice = Invoice()
    _apply(invoice, record, replace_items=True)

    db.add(invoice)
    _commit(db)
    db.refresh(invoice)

    logger.info(
        "Created invoice %s for %r (total=%.2f, status=%s)",
        invoice.invoice_number, invoice.client_name, invoice.total, invoice.status,
    )
    return invoice


def update_invoice(
    db: Session,
    invoice_id: int,
    changes: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Invoice:
    now = now or utc_now()
    invoice = get_invoice(db, invoice_id)
    previous_status = invoice.status

    current = {field: getattr(invoice, field) for field in INVOICE_FIELDS}
    current["items"] = _items_from(invoice)

    changes = dict(changes)
    if "invoice_number" in changes and not (changes["invoice_number"] or "").strip():
        # An emptied number keeps the one already assigned
        changes.pop("invoice_number")

    record = prepare_invoice({**current, **changes}, now)
    _apply(invoice, record, replace_items="items" in changes)

    _commit(db)
    db.refresh(invoice)

    if invoice.status == OVERDUE and previous_status != OVERDUE:
        logger.info("Invoice %s is now overdue (due %s)", invoice.invoice_number, invoice.due_date)
    logger.info("Updated invoice %s (total=%.2f)", invoice.invoice_number, invoice.total)
    return invoice


def mark_invoice_paid(
    db: Session,
    invoice_id: int,
    payment_date: Optional[datetime] = None,
    create_transaction: bool = True,
    now: Optional[datetime] = None,
) -> Tuple[Invoice, Optional[Transaction]]:
    """
    Mark an invoice paid and, by default, record the payment as income.

    The invoice change and the income transaction are committed together,
    so a failure leaves neither behind.
    """
    now = now or utc_now()
    invoice = get_invoice(db, invoice_id)
    ensure_payable(invoice.status)

    current = {field: getattr(invoice, field) for field in INVOICE_FIELDS}
    current["items"] = _items_from(invoice)
    current["status"] = PAID
    current["payment_date"] = payment_date or now

    record = prepare_invoice(current, now)
    _apply(invoice, record, replace_items=False)

    payment: Optional[Transaction] = None
    if create_transaction:
        payment = build_transaction(
            payment_transaction_fields(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                client_name=invoice.client_name,
                total=invoice.total,
                payment_date=invoice.payment_date,
            )
        )
        db.add(payment)

    _commit(db)
    db.refresh(invoice)
    if payment is not None:
        db.refresh(payment)

    logger.info(
        "Invoice %s marked paid on %s%s",
        invoice.invoice_number,
        invoice.payment_date,
        f" (income transaction #{payment.id})" if payment is not None else "",
    )
    return invoice, payment


def delete_invoice(db: Session, invoice_id: int) -> None:
    invoice = get_invoice(db, invoice_id)
    number = invoice.invoice_number
    db.delete(invoice)
    db.commit()
    logger.info("Deleted invoice %s", number)
