# app/services/transactions.py
#
# Transaction write path and lookups.
# Create / update / delete income and expense records, filter them for the
# list endpoint, and resolve the weak reference to a related invoice or
# campaign.

import logging
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.errors import NotFoundError
from app.services.validation import validate_transaction
from models import Campaign, Invoice, Transaction, utc_now

logger = logging.getLogger(__name__)

TRANSACTION_FIELDS = (
    "type",
    "category",
    "amount",
    "date",
    "description",
    "notes",
    "related_to",
    "related_model",
)

RELATED_TYPES = {"Invoice": Invoice, "Campaign": Campaign}


def list_transactions(
    db: Session,
    type: str | None = None,
    category: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> List[Transaction]:
    """Transactions matching the filters, newest first. `end` is exclusive."""
    query = db.query(Transaction)
    if type:
        query = query.filter(Transaction.type == type)
    if category:
        query = query.filter(Transaction.category == category)
    if start is not None:
        query = query.filter(Transaction.date >= start)
    if end is not None:
        query = query.filter(Transaction.date < end)
    return query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()


def get_transaction(db: Session, transaction_id: int) -> Transaction:
    tx = db.get(Transaction, transaction_id)
    if tx is None:
        raise NotFoundError("Transaction")
    return tx


def get_related(db: Session, tx: Transaction):
    """The Invoice or Campaign a transaction points at, or None (missing or unset)."""
    model = RELATED_TYPES.get(tx.related_model or "")
    if model is None or tx.related_to is None:
        return None
    return db.get(model, tx.related_to)


def build_transaction(data: Dict[str, Any]) -> Transaction:
    """Validate a transaction payload and turn it into an (unsaved) ORM object."""
    record = validate_transaction(data)
    if record.get("date") is None:
        record["date"] = utc_now()
    return Transaction(**{k: record.get(k) for k in TRANSACTION_FIELDS})


def create_transaction(db: Session, data: Dict[str, Any]) -> Transaction:
    tx = build_transaction(data)
    db.add(tx)
    db.commit()
    db.refresh(tx)
    logger.info("Created %s transaction #%s (%s, %.2f)", tx.type, tx.id, tx.category, tx.amount)
    return tx


def update_transaction(db: Session, transaction_id: int, changes: Dict[str, Any]) -> Transaction:
    tx = get_transaction(db, transaction_id)

    current = {field: getattr(tx, field) for field in TRANSACTION_FIELDS}
    record = validate_transaction({**current, **changes})
    if record.get("date") is None:
        record["date"] = current["date"]

    for field in TRANSACTION_FIELDS:
        setattr(tx, field, record.get(field))

    db.commit()
    db.refresh(tx)
    logger.info("Updated transaction #%s", tx.id)
    return tx


def delete_transaction(db: Session, transaction_id: int) -> None:
    tx = get_transaction(db, transaction_id)
    db.delete(tx)
    db.commit()
    logger.info("Deleted transaction #%s", transaction_id)
