# app/services/validation.py
#
# Record Validation
# The write path validates the full (merged) record against the *Create
# schema, so creates and partial updates obey the same rules. Pydantic
# errors are converted to the app's ValidationError here and nowhere else.

from typing import Any, Dict, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.schemas import CampaignCreate, InvoiceCreate, TransactionCreate


def validate_record(schema: Type[BaseModel], data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a snake_case record and return its normalized form
    (strings trimmed, blanks turned into None, defaults filled in).
    """
    try:
        return schema.model_validate(data).model_dump()
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


def validate_transaction(data: Dict[str, Any]) -> Dict[str, Any]:
    return validate_record(TransactionCreate, data)


def validate_campaign(data: Dict[str, Any]) -> Dict[str, Any]:
    return validate_record(CampaignCreate, data)


def validate_invoice(data: Dict[str, Any]) -> Dict[str, Any]:
    return validate_record(InvoiceCreate, data)
