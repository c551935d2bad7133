# app/routes_dashboard.py

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .deps import get_db, ok, templates
from .services import reports
from .services.currency import format_currency
from .services.periods import current_month, resolve_period
from models import utc_now

router = APIRouter()


@router.get("/api/dashboard/summary")
def financial_summary(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    now = utc_now()
    period = resolve_period(start_date, end_date, now)
    return ok(reports.financial_summary(db, period, now))


@router.get("/api/dashboard/marketing")
def marketing_summary(db: Session = Depends(get_db)):
    return ok(reports.marketing_summary(db))


@router.get("/api/dashboard/overview")
def overview(db: Session = Depends(get_db)):
    return ok(reports.overview(db, utc_now()))


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    now = utc_now()
    currency = settings.currency

    month = current_month(now)
    month_label = month.start.strftime("%B %Y")

    year_to_date = resolve_period(None, None, now)
    summary = reports.financial_summary(db, year_to_date, now)
    marketing = reports.marketing_summary(db)
    stats = reports.overview(db, now)

    def money(amount):
        return format_currency(amount, currency)

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "month_label": month_label,
            "currency": currency,
            "overview": stats,
            "summary": summary,
            "marketing": marketing,
            "money": money,
        },
    )
