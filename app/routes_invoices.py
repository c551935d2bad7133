# routes_invoices.py
"""
Routes for invoices: CRUD, mark-as-paid, and invoice statistics.
"""

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from app.deps import get_db, ok, ok_list, ok_message
from app.schemas import (
    InvoiceCreate,
    InvoiceRead,
    InvoiceUpdate,
    MarkPaidPayload,
    TransactionRead,
    dump,
)
from app.services import invoices as service
from app.services import reports
from app.services.periods import parse_range

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.get("/stats/overview")
def invoice_stats(db: Session = Depends(get_db)):
    return ok(reports.invoice_stats(db))


@router.get("")
def list_invoices(
    status: str | None = Query(None),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    start, end = parse_range(start_date, end_date)
    rows = service.list_invoices(db, status=status, start=start, end=end)
    return ok_list([dump(InvoiceRead.model_validate(inv)) for inv in rows])


@router.get("/{invoice_id}")
def get_invoice(invoice_id: int, db: Session = Depends(get_db)):
    return ok(dump(InvoiceRead.model_validate(service.get_invoice(db, invoice_id))))


@router.post("", status_code=201)
def create_invoice(payload: InvoiceCreate, db: Session = Depends(get_db)):
    invoice = service.create_invoice(db, payload.model_dump())
    return ok(dump(InvoiceRead.model_validate(invoice)))


@router.put("/{invoice_id}")
def update_invoice(invoice_id: int, payload: InvoiceUpdate, db: Session = Depends(get_db)):
    invoice = service.update_invoice(db, invoice_id, payload.model_dump(exclude_unset=True))
    return ok(dump(InvoiceRead.model_validate(invoice)))


@router.patch("/{invoice_id}/pay")
def mark_invoice_paid(
    invoice_id: int,
    payload: MarkPaidPayload | None = Body(None),
    db: Session = Depends(get_db),
):
    """
    Mark an invoice as paid.

    Body (optional): {"paymentDate": ..., "createTransaction": true}
    Returns the updated invoice and the income transaction (or null).
    """
    payload = payload or MarkPaidPayload()
    invoice, payment = service.mark_invoice_paid(
        db,
        invoice_id,
        payment_date=payload.payment_date,
        create_transaction=payload.create_transaction,
    )
    return ok(
        {
            "invoice": dump(InvoiceRead.model_validate(invoice)),
            "transaction": dump(TransactionRead.model_validate(payment)) if payment is not None else None,
        }
    )


@router.delete("/{invoice_id}")
def delete_invoice(invoice_id: int, db: Session = Depends(get_db)):
    service.delete_invoice(db, invoice_id)
    return ok_message("Invoice deleted successfully")
