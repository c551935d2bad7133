# models.py
# Role: SQLAlchemy ORM models for the business manager domain.
#       Defines transactions (income/expense), marketing campaigns,
#       and invoices with their line items.

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from db import Base


def utc_now() -> datetime:
    """Current time as a naive UTC datetime (how all timestamps are stored)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)


class Transaction(TimestampMixin, Base):
    """
    ORM model representing a single income or expense event.

    Amounts are always positive; `type` says which side of the ledger the
    row belongs to. `related_to` / `related_model` point at an Invoice or
    Campaign for lookup only (no foreign key, nothing cascades).
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)

    # "income" or "expense"
    type = Column(String(10), nullable=False)

    # Free-form: project, invoice, deposit, salary, subscription, marketing, ...
    category = Column(String(50), nullable=False)

    amount = Column(Float, nullable=False)

    date = Column(DateTime, nullable=False, default=utc_now)

    description = Column(String(200), nullable=False)

    notes = Column(String(250), nullable=True)

    # Weak reference: "Invoice" or "Campaign"
    related_to = Column(Integer, nullable=True)
    related_model = Column(String(20), nullable=True)

    __table_args__ = (
        Index("ix_transactions_type_date", "type", "date"),
        Index("ix_transactions_category", "category"),
        # Ids are referenced weakly from elsewhere; never hand a deleted id out again
        {"sqlite_autoincrement": True},
    )


class Campaign(TimestampMixin, Base):
    """
    A marketing campaign on one platform over a date range.

    `cost_per_lead` and `roi` are derived from budget, leads and conversions
    and stored so lists and reports don't have to recompute them.
    """

    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)

    # "Facebook", "Google" or "Email"
    platform = Column(String(20), nullable=False, index=True)

    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    budget = Column(Float, nullable=False, default=0.0)
    leads_generated = Column(Integer, nullable=False, default=0)
    conversions = Column(Integer, nullable=False, default=0)

    # Derived
    cost_per_lead = Column(Float, nullable=False, default=0.0)
    roi = Column(Float, nullable=False, default=0.0)

    # "active", "completed" or "paused"
    status = Column(String(20), nullable=False, default="active", index=True)

    __table_args__ = {"sqlite_autoincrement": True}


class Invoice(TimestampMixin, Base):
    """
    A bill to a client. Line items are stored in `invoice_items` and are
    owned by the invoice (deleted with it).
    """

    __tablename__ = "invoices"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)

    # "INV-0001", ... ; uniqueness enforced by the database
    invoice_number = Column(String(50), unique=True, nullable=False)

    client_name = Column(String(200), nullable=False)
    client_email = Column(String(200), nullable=True)
    client_address = Column(Text, nullable=True)

    # Derived from items and tax_rate
    subtotal = Column(Float, nullable=False, default=0.0)
    tax = Column(Float, nullable=False, default=0.0)
    tax_rate = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False, default=0.0)

    issue_date = Column(DateTime, nullable=False, default=utc_now)
    due_date = Column(DateTime, nullable=False)

    # "pending", "paid" or "overdue"
    status = Column(String(20), nullable=False, default="pending", index=True)
    payment_date = Column(DateTime, nullable=True)

    notes = Column(Text, nullable=True)

    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)

    # Keeps the client's ordering of line items
    position = Column(Integer, nullable=False, default=0)

    description = Column(String(500), nullable=False)
    quantity = Column(Float, nullable=False)
    price = Column(Float, nullable=False)
    total = Column(Float, nullable=False, default=0.0)

    invoice = relationship("Invoice", back_populates="items")
