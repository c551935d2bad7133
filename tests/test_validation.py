from datetime import datetime

import pytest

from app.errors import ValidationError
from app.services.validation import (
    validate_campaign,
    validate_invoice,
    validate_transaction,
)


def _campaign(**overrides):
    data = {
        "name": "  Launch  ",
        "platform": "Google",
        "start_date": datetime(2025, 7, 1),
        "end_date": datetime(2025, 7, 31),
        "budget": 8000,
        "leads_generated": 320,
        "conversions": 68,
    }
    data.update(overrides)
    return data


def _invoice(**overrides):
    data = {
        "client_name": "Globex",
        "items": [{"description": "Audit", "quantity": 1, "price": 100}],
        "issue_date": datetime(2025, 1, 1),
        "due_date": datetime(2025, 2, 1),
    }
    data.update(overrides)
    return data


def _fields(exc):
    return [message.split(":")[0] for message in exc.value.errors]


# ---- Campaigns ----

def test_campaign_is_normalized():
    record = validate_campaign(_campaign())

    assert record["name"] == "Launch"
    assert record["status"] == "active"


def test_campaign_defaults_leads_and_conversions():
    data = _campaign()
    del data["leads_generated"], data["conversions"]

    record = validate_campaign(data)

    assert record["leads_generated"] == 0
    assert record["conversions"] == 0


def test_conversions_cannot_exceed_leads():
    with pytest.raises(ValidationError) as exc:
        validate_campaign(_campaign(leads_generated=5, conversions=10))

    assert exc.value.errors == ["Conversions cannot be greater than leads generated"]


def test_end_date_before_start_date_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_campaign(_campaign(end_date=datetime(2025, 6, 1)))

    assert exc.value.errors == ["End date must be after start date"]


def test_same_start_and_end_date_is_allowed():
    validate_campaign(_campaign(end_date=datetime(2025, 7, 1)))


def test_campaign_reports_every_field_problem():
    with pytest.raises(ValidationError) as exc:
        validate_campaign(_campaign(name=" ", platform="TikTok", budget=-1))

    assert _fields(exc) == ["name", "platform", "budget"]
    assert exc.value.message == ", ".join(exc.value.errors)


def test_campaign_budget_must_be_finite():
    with pytest.raises(ValidationError) as exc:
        validate_campaign(_campaign(budget=float("inf")))

    assert _fields(exc) == ["budget"]
    assert "finite" in exc.value.message


# ---- Invoices ----

def test_invoice_defaults():
    record = validate_invoice(_invoice(invoice_number="  ", notes=""))

    assert record["tax_rate"] == 0
    assert record["status"] == "pending"
    assert record["invoice_number"] is None
    assert record["notes"] is None


def test_invoice_needs_items():
    with pytest.raises(ValidationError) as exc:
        validate_invoice(_invoice(items=[]))

    assert _fields(exc) == ["items"]


def test_invoice_item_rules():
    items = [
        {"description": "", "quantity": 0, "price": 0},
        {"description": "ok", "quantity": 1, "price": 5},
    ]
    with pytest.raises(ValidationError) as exc:
        validate_invoice(_invoice(items=items))

    assert _fields(exc) == ["items.0.description", "items.0.quantity", "items.0.price"]


def test_invoice_item_price_must_be_finite():
    items = [{"description": "Audit", "quantity": 1, "price": float("nan")}]
    with pytest.raises(ValidationError) as exc:
        validate_invoice(_invoice(items=items))

    assert _fields(exc) == ["items.0.price"]


def test_invoice_tax_rate_range():
    with pytest.raises(ValidationError):
        validate_invoice(_invoice(tax_rate=101))
    with pytest.raises(ValidationError):
        validate_invoice(_invoice(tax_rate=-1))


def test_invoice_requires_client_and_due_date():
    data = _invoice(client_name=None)
    del data["due_date"]

    with pytest.raises(ValidationError) as exc:
        validate_invoice(data)

    assert len(exc.value.errors) == 2
    assert any("required" in message for message in exc.value.errors)


# ---- Transactions ----

def test_transaction_rules():
    with pytest.raises(ValidationError) as exc:
        validate_transaction(
            {"type": "refund", "category": "", "amount": 0, "description": "x" * 201, "notes": "n" * 251}
        )

    assert _fields(exc) == ["type", "category", "amount", "description", "notes"]


def test_transaction_amount_must_be_finite():
    base = {"type": "income", "category": "project", "description": "x"}

    for bad in (float("nan"), float("inf")):
        with pytest.raises(ValidationError) as exc:
            validate_transaction({**base, "amount": bad})
        assert _fields(exc) == ["amount"]


def test_transaction_related_model_required_with_reference():
    with pytest.raises(ValidationError) as exc:
        validate_transaction(
            {"type": "income", "category": "project", "amount": 10, "description": "x", "related_to": 3}
        )

    assert exc.value.errors == ["Related model is required when relatedTo is set"]


def test_transaction_is_trimmed():
    record = validate_transaction(
        {"type": "expense", "category": " salary ", "amount": 10, "description": "  June  ", "notes": "  "}
    )

    assert record["category"] == "salary"
    assert record["description"] == "June"
    assert record["notes"] is None
