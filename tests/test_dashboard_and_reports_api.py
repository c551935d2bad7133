import csv
import io

import pytest

YEAR_2025 = {"startDate": "2025-01-01", "endDate": "2025-12-31"}


@pytest.fixture
def seeded(client, campaign_payload, invoice_payload):
    transactions = [
        {"type": "income", "category": "project", "amount": 15000, "date": "2025-06-15",
         "description": "Website redesign project"},
        {"type": "expense", "category": "salary", "amount": 8000, "date": "2025-06-30",
         "description": "June salaries"},
    ]
    for tx in transactions:
        assert client.post("/api/transactions", json=tx).status_code == 201

    assert client.post("/api/campaigns", json=campaign_payload()).status_code == 201

    invoice = invoice_payload(issueDate="2025-09-01")
    assert client.post("/api/invoices", json=invoice).status_code == 201
    return client


# ---- Root ----

def test_root_redirects_to_dashboard(client):
    res = client.get("/", follow_redirects=False)

    assert res.status_code == 302
    assert res.headers["location"] == "/dashboard"


def test_health(client):
    body = client.get("/api/health").json()

    assert body["success"] is True
    assert body["message"] == "API is running"
    assert "timestamp" in body


def test_active_currency(client):
    data = client.get("/api/config/currency").json()["data"]

    assert set(data) == {"code", "symbol", "locale", "name"}


# ---- Dashboard ----

def test_financial_summary(seeded):
    data = seeded.get("/api/dashboard/summary", params=YEAR_2025).json()["data"]

    assert data["totalIncome"] == 15000
    assert data["totalExpense"] == 8000
    assert data["profit"] == 7000
    assert data["profitMargin"] == "46.67"
    assert data["expenseByCategory"] == [{"category": "salary", "total": 8000.0, "count": 1}]
    assert data["pendingInvoicesAmount"] == 27500
    assert isinstance(data["monthlyTrend"], list)


def test_profit_margin_without_income(client):
    data = client.get("/api/dashboard/summary", params=YEAR_2025).json()["data"]

    assert data["totalIncome"] == 0
    assert data["profitMargin"] == 0


def test_marketing_summary(seeded):
    data = seeded.get("/api/dashboard/marketing").json()["data"]

    assert data["totalCampaigns"] == 1
    assert data["totalBudget"] == 5000
    assert data["avgCostPerLead"] == "20.00"
    assert data["conversionRate"] == "18.00"
    assert data["leadsByPlatform"][0]["platform"] == "Facebook"


def test_marketing_summary_without_campaigns(client):
    data = client.get("/api/dashboard/marketing").json()["data"]

    assert data["avgCostPerLead"] == "0.00"
    assert data["conversionRate"] == "0.00"


def test_overview_uses_current_month(client, invoice_payload, past_date):
    client.post("/api/transactions", json={
        "type": "income", "category": "deposit", "amount": 1000, "description": "Deposit",
    })
    client.post("/api/transactions", json={
        "type": "expense", "category": "utilities", "amount": 400, "description": "Internet",
    })
    client.post("/api/invoices", json=invoice_payload())
    client.post("/api/invoices", json=invoice_payload(dueDate=past_date))

    data = client.get("/api/dashboard/overview").json()["data"]

    assert data["monthlyIncome"] == 1000
    assert data["monthlyExpenses"] == 400
    assert data["monthlyProfit"] == 600
    assert data["activeCampaigns"] == 0
    assert data["pendingInvoices"] == 1
    assert data["overdueInvoices"] == 1


def test_dashboard_page(seeded):
    res = seeded.get("/dashboard")

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert "Dashboard" in res.text
    assert "Facebook" in res.text


# ---- Reports ----

def test_financial_report(seeded):
    data = seeded.get("/api/reports/financial", params=YEAR_2025).json()["data"]

    assert data["summary"] == {"totalIncome": 15000, "totalExpense": 8000, "netProfit": 7000}
    assert data["incomeByCategory"] == {"project": 15000}
    assert data["expenseByCategory"] == {"salary": 8000}
    assert len(data["transactions"]) == 2
    assert data["period"]["start"] == "2025-01-01T00:00:00"
    assert data["period"]["end"] == "2026-01-01T00:00:00"


def test_financial_report_single_type(seeded):
    params = dict(YEAR_2025, type="expense")
    data = seeded.get("/api/reports/financial", params=params).json()["data"]

    assert data["summary"]["totalIncome"] == 0
    assert [tx["type"] for tx in data["transactions"]] == ["expense"]


def test_marketing_report(seeded):
    data = seeded.get("/api/reports/marketing", params=YEAR_2025).json()["data"]

    assert data["summary"]["totalCampaigns"] == 1
    assert data["summary"]["avgCostPerLead"] == "20.00"
    assert data["platformPerformance"]["Facebook"]["leads"] == 250
    assert data["campaigns"][0]["conversionRate"] == pytest.approx(18)


def test_invoice_report(seeded):
    data = seeded.get("/api/reports/invoices", params=YEAR_2025).json()["data"]

    assert data["summary"]["totalInvoices"] == 1
    assert data["summary"]["pendingAmount"] == 27500
    assert data["summary"]["paidAmount"] == 0
    assert data["summary"]["statusCounts"] == {"paid": 0, "pending": 1, "overdue": 0}


def test_comprehensive_report(seeded):
    data = seeded.get("/api/reports/comprehensive", params=YEAR_2025).json()["data"]

    assert data["financial"]["netProfit"] == 7000
    assert data["marketing"]["totalCampaigns"] == 1
    assert data["invoices"]["totalInvoices"] == 1


def test_invalid_report_period(client):
    res = client.get("/api/reports/financial", params={"endDate": "31/12/2025"})

    assert res.status_code == 400
    assert "Invalid endDate" in res.json()["message"]


# ---- CSV export ----

def _read_csv(res):
    return list(csv.DictReader(io.StringIO(res.text)))


def test_financial_export(seeded):
    res = seeded.get("/api/reports/financial/export", params=YEAR_2025)

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert "financial-report-20250101-20260101.csv" in res.headers["content-disposition"]

    rows = _read_csv(res)
    assert list(rows[0]) == ["Date", "Type", "Category", "Description", "Amount", "Notes", "Currency"]
    assert [row["Date"] for row in rows] == ["2025-06-30", "2025-06-15"]
    assert float(rows[0]["Amount"]) == 8000


def test_marketing_export(seeded):
    rows = _read_csv(seeded.get("/api/reports/marketing/export", params=YEAR_2025))

    assert len(rows) == 1
    assert rows[0]["Campaign"] == "Summer Sale Facebook Campaign"
    assert rows[0]["Start Date"] == "2025-06-01"
    assert float(rows[0]["ROI (%)"]) == pytest.approx(80)


def test_invoice_export(seeded):
    rows = _read_csv(seeded.get("/api/reports/invoices/export", params=YEAR_2025))

    assert rows[0]["Invoice"] == "INV-0001"
    assert rows[0]["Issue Date"] == "2025-09-01"
    assert rows[0]["Payment Date"] == ""


def test_unknown_export_kind(client):
    res = client.get("/api/reports/payroll/export")

    assert res.status_code == 404
    assert res.json()["message"] == "Report not found"
