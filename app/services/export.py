# app/services/export.py
#
# CSV Export
# Turn report rows into CSV text with pandas. Column order and headers are
# fixed per report kind; amounts are written as plain numbers, the currency
# code goes into its own column.

from typing import Any, Dict, List

import pandas as pd

from app.config import Currency

# report kind -> (rows key in the report payload, [(json key, CSV header), ...])
EXPORT_COLUMNS: Dict[str, tuple[str, list[tuple[str, str]]]] = {
    "financial": (
        "transactions",
        [
            ("date", "Date"),
            ("type", "Type"),
            ("category", "Category"),
            ("description", "Description"),
            ("amount", "Amount"),
            ("notes", "Notes"),
        ],
    ),
    "marketing": (
        "campaigns",
        [
            ("name", "Campaign"),
            ("platform", "Platform"),
            ("startDate", "Start Date"),
            ("endDate", "End Date"),
            ("budget", "Budget"),
            ("leadsGenerated", "Leads"),
            ("conversions", "Conversions"),
            ("costPerLead", "Cost per Lead"),
            ("conversionRate", "Conversion Rate (%)"),
            ("roi", "ROI (%)"),
            ("status", "Status"),
        ],
    ),
    "invoices": (
        "invoices",
        [
            ("invoiceNumber", "Invoice"),
            ("clientName", "Client"),
            ("issueDate", "Issue Date"),
            ("dueDate", "Due Date"),
            ("subtotal", "Subtotal"),
            ("tax", "Tax"),
            ("total", "Total"),
            ("status", "Status"),
            ("paymentDate", "Payment Date"),
        ],
    ),
}


def report_to_dataframe(kind: str, report: Dict[str, Any], currency: Currency) -> pd.DataFrame:
    """
    Build the export table for one report kind.
    Raises KeyError for kinds that have no CSV layout.
    """
    rows_key, columns = EXPORT_COLUMNS[kind]
    rows: List[Dict[str, Any]] = report.get(rows_key, [])

    keys = [key for key, _ in columns]
    df = pd.DataFrame(rows, columns=keys)

    # Dates come in as ISO strings; keep only the day part
    for key in keys:
        if key.endswith("Date") or key == "date":
            df[key] = pd.to_datetime(df[key], format="ISO8601", errors="coerce").dt.strftime("%Y-%m-%d")

    df = df.rename(columns=dict(columns))
    df["Currency"] = currency.code
    return df


def report_to_csv(kind: str, report: Dict[str, Any], currency: Currency) -> str:
    return report_to_dataframe(kind, report, currency).to_csv(index=False)
