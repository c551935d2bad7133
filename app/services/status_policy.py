# app/services/status_policy.py
#
# Invoice Status Policy
# pending -> overdue happens automatically on save once the due date has
# passed; -> paid only happens through mark-as-paid. Nothing moves an
# invoice out of "paid" automatically.

from datetime import datetime
from typing import Any, Dict

from app.errors import ValidationError

PENDING = "pending"
PAID = "paid"
OVERDUE = "overdue"


def is_overdue(status: str, due_date: datetime, now: datetime) -> bool:
    return status != PAID and due_date < now


def apply_overdue(record: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """Return the record with status set to overdue if it is unpaid and past due."""
    if is_overdue(record["status"], record["due_date"], now):
        return {**record, "status": OVERDUE}
    return record


def payment_transaction_fields(
    invoice_id: int,
    invoice_number: str,
    client_name: str,
    total: float,
    payment_date: datetime,
) -> Dict[str, Any]:
    """Fields of the income transaction recorded when an invoice is paid."""
    return {
        "type": "income",
        "category": "invoice",
        "amount": total,
        "date": payment_date,
        "description": f"Payment received for invoice {invoice_number} from {client_name}"[:200],
        "related_to": invoice_id,
        "related_model": "Invoice",
    }


def ensure_payable(status: str) -> None:
    """A paid invoice cannot be paid again (it would record the income twice)."""
    if status == PAID:
        raise ValidationError("Invoice is already paid")
