# app/services/calculations.py
#
# Derived-Field Calculations
# Pure functions that compute the stored and read-only derived fields of
# invoices (item totals, subtotal, tax, total) and campaigns (cost per lead,
# ROI, conversion rate). No database access here; the write-path services
# call these before persisting.

import math
from datetime import datetime
from typing import Any, Dict, List, NamedTuple

from app.errors import ValidationError

# Each conversion is assumed to be worth this many times the cost per lead.
ASSUMED_VALUE_MULTIPLIER = 10

# ROI reported for campaigns with no leads or no conversions (total loss).
TOTAL_LOSS_ROI = -100.0


class InvoiceTotals(NamedTuple):
    items: List[Dict[str, Any]]
    subtotal: float
    tax: float
    total: float


class CampaignMetrics(NamedTuple):
    cost_per_lead: float
    roi: float


def _require_finite(message: str, *values: float) -> None:
    # Overflowing inputs (e.g. 1e308 * 10) must not reach the database as inf
    if not all(math.isfinite(v) for v in values):
        raise ValidationError(message)


# ---- Invoices ----

def item_total(quantity: float, price: float) -> float:
    return quantity * price


def compute_invoice_totals(items: List[Dict[str, Any]], tax_rate: float) -> InvoiceTotals:
    """
    Recompute every line total and the invoice subtotal / tax / total.

    Client-supplied item totals are ignored and overwritten. Values keep
    full float precision (no rounding).
    """
    priced_items: List[Dict[str, Any]] = []
    subtotal = 0.0

    for item in items:
        priced = dict(item)
        priced["total"] = item_total(item["quantity"], item["price"])
        subtotal += priced["total"]
        priced_items.append(priced)

    tax = subtotal * (tax_rate or 0) / 100
    _require_finite("Invoice total is out of range", subtotal, tax, subtotal + tax)
    return InvoiceTotals(priced_items, subtotal, tax, subtotal + tax)


def days_until_due(due_date: datetime, now: datetime) -> int:
    """Whole days until the due date, rounded up; negative once past due."""
    return math.ceil((due_date - now).total_seconds() / 86400)


# ---- Campaigns ----

def compute_campaign_metrics(budget: float, leads_generated: int, conversions: int) -> CampaignMetrics:
    """
    cost_per_lead = budget / leads  (0 without leads)
    roi = (conversions * cost_per_lead * 10 - budget) / budget * 100

    No leads or no conversions count as a total loss (-100). A zero budget
    with conversions has nothing to divide by; its ROI is 0 (nothing spent,
    nothing lost).
    """
    if leads_generated <= 0:
        return CampaignMetrics(0.0, TOTAL_LOSS_ROI)

    cost_per_lead = budget / leads_generated

    if conversions <= 0:
        return CampaignMetrics(cost_per_lead, TOTAL_LOSS_ROI)

    if budget == 0:
        return CampaignMetrics(cost_per_lead, 0.0)

    assumed_value_per_conversion = cost_per_lead * ASSUMED_VALUE_MULTIPLIER
    revenue = conversions * assumed_value_per_conversion
    roi = (revenue - budget) / budget * 100
    _require_finite("Campaign figures are out of range", cost_per_lead, roi)
    return CampaignMetrics(cost_per_lead, roi)


def conversion_rate(leads_generated: int, conversions: int) -> float:
    if leads_generated > 0:
        return conversions / leads_generated * 100
    return 0.0


def ratio_or_zero(numerator: float, denominator: float, scale: float = 1.0) -> float:
    """numerator / denominator * scale, or 0 when the denominator is 0 (for aggregate stats)."""
    if denominator:
        return numerator / denominator * scale
    return 0.0
