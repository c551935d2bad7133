# routes_transactions.py
"""
Routes for income / expense transactions: CRUD plus income and expense
summaries.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.deps import get_db, ok, ok_list, ok_message
from app.schemas import (
    CampaignRead,
    InvoiceRead,
    TransactionCreate,
    TransactionRead,
    TransactionUpdate,
    dump,
)
from app.services import reports
from app.services import transactions as service
from app.services.periods import parse_range, resolve_period
from models import Invoice, utc_now

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


def _serialize_related(related):
    if related is None:
        return None
    if isinstance(related, Invoice):
        return dump(InvoiceRead.model_validate(related))
    return dump(CampaignRead.model_validate(related))


# Summary routes are declared before /{transaction_id}

@router.get("/income/summary")
def income_summary(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    period = resolve_period(start_date, end_date, utc_now())
    return ok(reports.type_summary(db, "income", period))


@router.get("/expense/summary")
def expense_summary(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    period = resolve_period(start_date, end_date, utc_now())
    return ok(reports.type_summary(db, "expense", period))


@router.get("")
def list_transactions(
    type: str | None = Query(None),
    category: str | None = Query(None),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    start, end = parse_range(start_date, end_date)
    rows = service.list_transactions(db, type=type, category=category, start=start, end=end)
    return ok_list([dump(TransactionRead.model_validate(tx)) for tx in rows])


@router.get("/{transaction_id}")
def get_transaction(transaction_id: int, db: Session = Depends(get_db)):
    tx = service.get_transaction(db, transaction_id)
    data = dump(TransactionRead.model_validate(tx))
    data["related"] = _serialize_related(service.get_related(db, tx))
    return ok(data)


@router.post("", status_code=201)
def create_transaction(payload: TransactionCreate, db: Session = Depends(get_db)):
    tx = service.create_transaction(db, payload.model_dump())
    return ok(dump(TransactionRead.model_validate(tx)))


@router.put("/{transaction_id}")
def update_transaction(transaction_id: int, payload: TransactionUpdate, db: Session = Depends(get_db)):
    tx = service.update_transaction(db, transaction_id, payload.model_dump(exclude_unset=True))
    return ok(dump(TransactionRead.model_validate(tx)))


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: int, db: Session = Depends(get_db)):
    service.delete_transaction(db, transaction_id)
    return ok_message("Transaction deleted successfully")
