# app/services/reports.py
#
# Dashboard and Report Aggregations
# Sums, counts and group-bys over transactions, campaigns and invoices.
# Totals are computed by the database (func.sum / group_by); the report
# builders also return the matching rows for tables and CSV export.

from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import extract, func
from sqlalchemy.orm import Session

from app.schemas import CampaignRead, InvoiceRead, TransactionRead, dump
from app.services.calculations import ratio_or_zero
from app.services.periods import Period, current_month, shift_months
from app.services.status_policy import OVERDUE, PAID, PENDING
from models import Campaign, Invoice, Transaction

# Number of months shown in the dashboard trend chart
TREND_MONTHS = 6

# Monthly campaign buckets returned by the stats endpoints
CAMPAIGN_MONTHS_LIMIT = 12


def _fixed2(value: float) -> str:
    # Percentages / averages are reported as 2-decimal strings
    return f"{value:.2f}"


# ---- Transactions ----

def type_totals(db: Session, type: str, period: Period) -> Dict[str, Any]:
    total, count = (
        db.query(
            func.coalesce(func.sum(Transaction.amount), 0.0),
            func.count(Transaction.id),
        )
        .filter(
            Transaction.type == type,
            Transaction.date >= period.start,
            Transaction.date < period.end,
        )
        .one()
    )
    return {"total": float(total), "count": int(count)}


def totals_by_category(db: Session, type: str, period: Period) -> List[Dict[str, Any]]:
    total_col = func.sum(Transaction.amount)
    rows = (
        db.query(
            Transaction.category.label("category"),
            total_col.label("total"),
            func.count(Transaction.id).label("count"),
        )
        .filter(
            Transaction.type == type,
            Transaction.date >= period.start,
            Transaction.date < period.end,
        )
        .group_by(Transaction.category)
        .order_by(total_col.desc())
        .all()
    )
    return [{"category": r.category, "total": float(r.total), "count": int(r.count)} for r in rows]


def type_summary(db: Session, type: str, period: Period) -> Dict[str, Any]:
    """Income or expense total, count and per-category breakdown for a period."""
    summary = type_totals(db, type, period)
    summary["byCategory"] = totals_by_category(db, type, period)
    return summary


def monthly_trend(db: Session, since: datetime, until: datetime) -> List[Dict[str, Any]]:
    year = extract("year", Transaction.date)
    month = extract("month", Transaction.date)
    rows = (
        db.query(
            year.label("year"),
            month.label("month"),
            Transaction.type.label("type"),
            func.sum(Transaction.amount).label("total"),
        )
        .filter(Transaction.date >= since, Transaction.date < until)
        .group_by(year, month, Transaction.type)
        .order_by(year, month, Transaction.type)
        .all()
    )
    return [
        {"year": int(r.year), "month": int(r.month), "type": r.type, "total": float(r.total)}
        for r in rows
    ]


# ---- Invoices ----

def outstanding_invoice_amount(db: Session) -> float:
    """Total of invoices that still wait for payment (pending or overdue)."""
    total = (
        db.query(func.coalesce(func.sum(Invoice.total), 0.0))
        .filter(Invoice.status.in_([PENDING, OVERDUE]))
        .scalar()
    )
    return float(total or 0.0)


def invoice_stats(db: Session) -> Dict[str, Any]:
    rows = (
        db.query(
            Invoice.status.label("status"),
            func.count(Invoice.id).label("count"),
            func.coalesce(func.sum(Invoice.total), 0.0).label("total"),
        )
        .group_by(Invoice.status)
        .all()
    )
    counts = {r.status: int(r.count) for r in rows}
    amount_by_status = [{"status": r.status, "total": float(r.total)} for r in rows]

    return {
        "totalInvoices": sum(counts.values()),
        "paidInvoices": counts.get(PAID, 0),
        "pendingInvoices": counts.get(PENDING, 0),
        "overdueInvoices": counts.get(OVERDUE, 0),
        "totalAmount": sum(item["total"] for item in amount_by_status),
        "amountByStatus": amount_by_status,
    }


# ---- Campaigns ----

def campaign_totals(db: Session) -> Dict[str, Any]:
    total_campaigns, budget, leads, conversions = db.query(
        func.count(Campaign.id),
        func.coalesce(func.sum(Campaign.budget), 0.0),
        func.coalesce(func.sum(Campaign.leads_generated), 0),
        func.coalesce(func.sum(Campaign.conversions), 0),
    ).one()
    active = db.query(func.count(Campaign.id)).filter(Campaign.status == "active").scalar() or 0
    return {
        "totalCampaigns": int(total_campaigns),
        "activeCampaigns": int(active),
        "totalBudget": float(budget),
        "totalLeads": int(leads),
        "totalConversions": int(conversions),
    }


def leads_by_platform(db: Session) -> List[Dict[str, Any]]:
    leads_col = func.sum(Campaign.leads_generated)
    rows = (
        db.query(
            Campaign.platform.label("platform"),
            leads_col.label("leads"),
            func.sum(Campaign.conversions).label("conversions"),
            func.sum(Campaign.budget).label("budget"),
            func.count(Campaign.id).label("campaigns"),
        )
        .group_by(Campaign.platform)
        .order_by(leads_col.desc())
        .all()
    )
    return [
        {
            "platform": r.platform,
            "leads": int(r.leads),
            "conversions": int(r.conversions),
            "budget": float(r.budget),
            "campaigns": int(r.campaigns),
        }
        for r in rows
    ]


def monthly_campaigns(db: Session) -> List[Dict[str, Any]]:
    year = extract("year", Campaign.start_date)
    month = extract("month", Campaign.start_date)
    rows = (
        db.query(
            year.label("year"),
            month.label("month"),
            func.count(Campaign.id).label("count"),
            func.sum(Campaign.budget).label("budget"),
            func.sum(Campaign.leads_generated).label("leads"),
        )
        .group_by(year, month)
        .order_by(year, month)
        .limit(CAMPAIGN_MONTHS_LIMIT)
        .all()
    )
    return [
        {
            "year": int(r.year),
            "month": int(r.month),
            "count": int(r.count),
            "budget": float(r.budget),
            "leads": int(r.leads),
        }
        for r in rows
    ]


def campaign_stats(db: Session) -> Dict[str, Any]:
    stats = campaign_totals(db)
    stats["leadsByPlatform"] = leads_by_platform(db)
    stats["monthlyCampaigns"] = monthly_campaigns(db)
    return stats


# ---- Dashboard ----

def financial_summary(db: Session, period: Period, now: datetime) -> Dict[str, Any]:
    income = type_totals(db, "income", period)["total"]
    expense = type_totals(db, "expense", period)["total"]
    profit = income - expense

    return {
        "totalIncome": income,
        "totalExpense": expense,
        "profit": profit,
        "profitMargin": _fixed2(profit / income * 100) if income > 0 else 0,
        "expenseByCategory": totals_by_category(db, "expense", period),
        "monthlyTrend": monthly_trend(db, shift_months(now, -TREND_MONTHS), period.end),
        "pendingInvoicesAmount": outstanding_invoice_amount(db),
    }


def marketing_summary(db: Session) -> Dict[str, Any]:
    summary = campaign_totals(db)
    leads = summary["totalLeads"]
    summary["avgCostPerLead"] = _fixed2(ratio_or_zero(summary["totalBudget"], leads))
    summary["conversionRate"] = _fixed2(ratio_or_zero(summary["totalConversions"], leads, 100))
    summary["leadsByPlatform"] = leads_by_platform(db)
    summary["monthlyCampaigns"] = monthly_campaigns(db)
    return summary


def overview(db: Session, now: datetime) -> Dict[str, Any]:
    month = current_month(now)
    income = type_totals(db, "income", month)["total"]
    expenses = type_totals(db, "expense", month)["total"]
    stats = invoice_stats(db)

    return {
        "monthlyIncome": income,
        "monthlyExpenses": expenses,
        "monthlyProfit": income - expenses,
        "activeCampaigns": campaign_totals(db)["activeCampaigns"],
        "pendingInvoices": stats["pendingInvoices"],
        "overdueInvoices": stats["overdueInvoices"],
    }


# ---- Reports ----

def _transactions_in(db: Session, period: Period, type: str | None = None) -> List[Transaction]:
    query = db.query(Transaction).filter(Transaction.date >= period.start, Transaction.date < period.end)
    if type:
        query = query.filter(Transaction.type == type)
    return query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()


def _campaigns_in(db: Session, period: Period, platform: str | None = None) -> List[Campaign]:
    query = db.query(Campaign).filter(Campaign.start_date >= period.start, Campaign.start_date < period.end)
    if platform:
        query = query.filter(Campaign.platform == platform)
    return query.order_by(Campaign.start_date.desc(), Campaign.id.desc()).all()


def _invoices_in(db: Session, period: Period, status: str | None = None) -> List[Invoice]:
    query = db.query(Invoice).filter(Invoice.issue_date >= period.start, Invoice.issue_date < period.end)
    if status:
        query = query.filter(Invoice.status == status)
    return query.order_by(Invoice.issue_date.desc(), Invoice.id.desc()).all()


def financial_report(db: Session, period: Period, type: str | None = None) -> Dict[str, Any]:
    """Income/expense statement for the period, optionally one type only."""
    if type not in ("income", "expense"):
        type = None
    rows = _transactions_in(db, period, type)

    income_by_category: Dict[str, float] = {}
    expense_by_category: Dict[str, float] = {}
    for tx in rows:
        bucket = income_by_category if tx.type == "income" else expense_by_category
        bucket[tx.category] = bucket.get(tx.category, 0.0) + tx.amount

    income = sum(income_by_category.values())
    expense = sum(expense_by_category.values())

    return {
        "period": period.as_dict(),
        "summary": {
            "totalIncome": income,
            "totalExpense": expense,
            "netProfit": income - expense,
        },
        "incomeByCategory": income_by_category,
        "expenseByCategory": expense_by_category,
        "transactions": [dump(TransactionRead.model_validate(tx)) for tx in rows],
    }


def marketing_report(db: Session, period: Period, platform: str | None = None) -> Dict[str, Any]:
    """Campaigns started in the period with totals and per-platform performance."""
    rows = _campaigns_in(db, period, platform)

    total_budget = sum(c.budget for c in rows)
    total_leads = sum(c.leads_generated for c in rows)
    total_conversions = sum(c.conversions for c in rows)

    platform_performance: Dict[str, Dict[str, Any]] = {}
    for c in rows:
        perf = platform_performance.setdefault(
            c.platform, {"campaigns": 0, "budget": 0.0, "leads": 0, "conversions": 0}
        )
        perf["campaigns"] += 1
        perf["budget"] += c.budget
        perf["leads"] += c.leads_generated
        perf["conversions"] += c.conversions

    return {
        "period": period.as_dict(),
        "summary": {
            "totalCampaigns": len(rows),
            "totalBudget": total_budget,
            "totalLeads": total_leads,
            "totalConversions": total_conversions,
            "avgCostPerLead": _fixed2(ratio_or_zero(total_budget, total_leads)),
            "conversionRate": _fixed2(ratio_or_zero(total_conversions, total_leads, 100)),
        },
        "platformPerformance": platform_performance,
        "campaigns": [dump(CampaignRead.model_validate(c)) for c in rows],
    }


def invoice_report(db: Session, period: Period, status: str | None = None) -> Dict[str, Any]:
    """Invoices issued in the period with amounts and counts per status."""
    rows = _invoices_in(db, period, status)

    amounts = {PAID: 0.0, PENDING: 0.0, OVERDUE: 0.0}
    counts = {PAID: 0, PENDING: 0, OVERDUE: 0}
    for inv in rows:
        amounts[inv.status] = amounts.get(inv.status, 0.0) + inv.total
        counts[inv.status] = counts.get(inv.status, 0) + 1

    return {
        "period": period.as_dict(),
        "summary": {
            "totalInvoices": len(rows),
            "totalAmount": sum(inv.total for inv in rows),
            "paidAmount": amounts[PAID],
            "pendingAmount": amounts[PENDING],
            "overdueAmount": amounts[OVERDUE],
            "statusCounts": counts,
        },
        "invoices": [dump(InvoiceRead.model_validate(inv)) for inv in rows],
    }


def comprehensive_report(db: Session, period: Period) -> Dict[str, Any]:
    income = type_totals(db, "income", period)["total"]
    expense = type_totals(db, "expense", period)["total"]
    campaigns = _campaigns_in(db, period)
    invoices = _invoices_in(db, period)

    return {
        "period": period.as_dict(),
        "financial": {
            "totalIncome": income,
            "totalExpense": expense,
            "netProfit": income - expense,
            "transactions": [dump(TransactionRead.model_validate(tx)) for tx in _transactions_in(db, period)],
        },
        "marketing": {
            "totalCampaigns": len(campaigns),
            "campaigns": [dump(CampaignRead.model_validate(c)) for c in campaigns],
        },
        "invoices": {
            "totalInvoices": len(invoices),
            "invoices": [dump(InvoiceRead.model_validate(inv)) for inv in invoices],
        },
    }
