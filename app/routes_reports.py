# routes_reports.py
"""
Report routes: financial statement, marketing performance, invoice status,
a combined report, and CSV downloads of the first three.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.deps import get_db, ok
from app.errors import NotFoundError
from app.services import reports
from app.services.export import EXPORT_COLUMNS, report_to_csv
from app.services.periods import resolve_period
from models import utc_now

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/financial")
def financial_report(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    type: str | None = Query(None),
    db: Session = Depends(get_db),
):
    period = resolve_period(start_date, end_date, utc_now())
    return ok(reports.financial_report(db, period, type))


@router.get("/marketing")
def marketing_report(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    platform: str | None = Query(None),
    db: Session = Depends(get_db),
):
    period = resolve_period(start_date, end_date, utc_now())
    return ok(reports.marketing_report(db, period, platform))


@router.get("/invoices")
def invoice_report(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    status: str | None = Query(None),
    db: Session = Depends(get_db),
):
    period = resolve_period(start_date, end_date, utc_now())
    return ok(reports.invoice_report(db, period, status))


@router.get("/comprehensive")
def comprehensive_report(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    period = resolve_period(start_date, end_date, utc_now())
    return ok(reports.comprehensive_report(db, period))


@router.get("/{kind}/export")
def export_report(
    kind: str,
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    type: str | None = Query(None),
    platform: str | None = Query(None),
    status: str | None = Query(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Download a report as CSV (financial, marketing or invoices)."""
    if kind not in EXPORT_COLUMNS:
        raise NotFoundError("Report")

    period = resolve_period(start_date, end_date, utc_now())
    if kind == "financial":
        report = reports.financial_report(db, period, type)
    elif kind == "marketing":
        report = reports.marketing_report(db, period, platform)
    else:
        report = reports.invoice_report(db, period, status)

    filename = f"{kind}-report-{period.start:%Y%m%d}-{period.end:%Y%m%d}.csv"
    return Response(
        content=report_to_csv(kind, report, settings.currency),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
