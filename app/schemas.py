"""
API Schemas

Pydantic models for request payloads and API responses.

Payloads and responses use camelCase keys (clientName, leadsGenerated, ...);
the Python side works with snake_case. The *Create models carry every value
rule (ranges, lengths, cross-field checks). Updates are checked by merging
the stored record with the changes and validating the result against the
matching *Create model (see app.services.validation).
"""

from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from app.services.calculations import conversion_rate, days_until_due
from models import utc_now

DESCRIPTION_MAX_LENGTH = 200
NOTES_MAX_LENGTH = 250


def _parse_date_only(value):
    # "2025-06-01" -> midnight of that day
    if isinstance(value, str) and len(value.strip()) == 10:
        return datetime.fromisoformat(value.strip())
    return value


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Datetime stored as naive UTC; accepts "YYYY-MM-DD" or ISO-8601
UtcDatetime = Annotated[datetime, BeforeValidator(_parse_date_only), AfterValidator(_to_naive_utc)]

TransactionType = Literal["income", "expense"]
RelatedModel = Literal["Invoice", "Campaign"]
Platform = Literal["Facebook", "Google", "Email"]
CampaignStatus = Literal["active", "completed", "paused"]
InvoiceStatus = Literal["pending", "paid", "overdue"]


class CamelModel(BaseModel):
    # NaN / inf are rejected before they can reach a calculation or a column
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )


# ---------- Transactions ----------

class TransactionCreate(CamelModel):
    type: TransactionType
    category: str = Field(..., min_length=1, max_length=50)
    amount: float = Field(..., gt=0)
    date: Optional[UtcDatetime] = None
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)
    related_to: Optional[int] = Field(None, description="Id of the related Invoice/Campaign")
    related_model: Optional[RelatedModel] = None

    @field_validator("notes")
    @classmethod
    def _blank_notes(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @model_validator(mode="after")
    def _related_pair(self):
        if self.related_to is not None and self.related_model is None:
            raise ValueError("Related model is required when relatedTo is set")
        return self


class TransactionUpdate(CamelModel):
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[UtcDatetime] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    related_to: Optional[int] = None
    related_model: Optional[RelatedModel] = None


class TransactionRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    category: str
    amount: float
    date: datetime
    description: str
    notes: Optional[str] = None
    related_to: Optional[int] = None
    related_model: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------- Campaigns ----------

class CampaignCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    platform: Platform
    start_date: UtcDatetime
    end_date: UtcDatetime
    budget: float = Field(..., ge=0)
    leads_generated: int = Field(0, ge=0)
    conversions: int = Field(0, ge=0)
    status: CampaignStatus = "active"

    @model_validator(mode="after")
    def _check_dates_and_funnel(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        if self.conversions > self.leads_generated:
            raise ValueError("Conversions cannot be greater than leads generated")
        return self


class CampaignUpdate(CamelModel):
    name: Optional[str] = None
    platform: Optional[Platform] = None
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    budget: Optional[float] = None
    leads_generated: Optional[int] = None
    conversions: Optional[int] = None
    status: Optional[CampaignStatus] = None


class CampaignRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    platform: str
    start_date: datetime
    end_date: datetime
    budget: float
    leads_generated: int
    conversions: int
    cost_per_lead: float
    roi: float
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Computed on read, never stored
    conversion_rate: float = 0.0

    @model_validator(mode="after")
    def _fill_conversion_rate(self):
        self.conversion_rate = conversion_rate(self.leads_generated, self.conversions)
        return self


# ---------- Invoices ----------

class InvoiceItemIn(CamelModel):
    description: str = Field(..., min_length=1)
    quantity: float = Field(..., ge=1)
    price: float = Field(..., gt=0)
    # Ignored: totals are always recomputed as quantity * price
    total: Optional[float] = None


class InvoiceCreate(CamelModel):
    invoice_number: Optional[str] = Field(None, max_length=50)
    client_name: str = Field(..., min_length=1, max_length=200)
    client_email: Optional[str] = Field(None, max_length=200)
    client_address: Optional[str] = None
    items: List[InvoiceItemIn] = Field(..., min_length=1)
    tax_rate: float = Field(0.0, ge=0, le=100)
    issue_date: Optional[UtcDatetime] = None
    due_date: UtcDatetime
    status: InvoiceStatus = "pending"
    payment_date: Optional[UtcDatetime] = None
    notes: Optional[str] = None

    @field_validator("invoice_number", "client_email", "client_address", "notes")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        # An empty invoice number means "assign the next one"
        return v or None


class InvoiceUpdate(CamelModel):
    invoice_number: Optional[str] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_address: Optional[str] = None
    items: Optional[List[InvoiceItemIn]] = None
    tax_rate: Optional[float] = None
    issue_date: Optional[UtcDatetime] = None
    due_date: Optional[UtcDatetime] = None
    status: Optional[InvoiceStatus] = None
    payment_date: Optional[UtcDatetime] = None
    notes: Optional[str] = None


class MarkPaidPayload(CamelModel):
    payment_date: Optional[UtcDatetime] = None
    create_transaction: bool = True


class InvoiceItemRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    quantity: float
    price: float
    total: float


class InvoiceRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_number: str
    client_name: str
    client_email: Optional[str] = None
    client_address: Optional[str] = None
    items: List[InvoiceItemRead]
    subtotal: float
    tax: float
    tax_rate: float
    total: float
    issue_date: datetime
    due_date: datetime
    status: str
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Computed on read
    days_until_due: int = 0

    @model_validator(mode="after")
    def _fill_days_until_due(self):
        self.days_until_due = days_until_due(self.due_date, utc_now())
        return self


def dump(model: BaseModel) -> dict:
    """Serialize a schema object into camelCase JSON-ready data."""
    return model.model_dump(by_alias=True, mode="json")
