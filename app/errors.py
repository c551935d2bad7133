# app/errors.py
# Role: Error taxonomy for the business manager and the FastAPI handlers
#       that turn those errors into the JSON error envelope.

"""
Application errors.

All of them render as:
    {"success": false, "error": <label>, "message": <text>}
"""

import logging
from typing import Iterable, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    error = "Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """A required field is missing, out of range, or a cross-field rule is broken."""

    status_code = 400
    error = "Validation Error"

    def __init__(self, errors: Iterable[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors: List[str] = list(errors)
        super().__init__(", ".join(self.errors))

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        return cls(error_messages(exc.errors()))


class DuplicateKeyError(AppError):
    status_code = 409
    error = "Duplicate Field"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} already exists")


class NotFoundError(AppError):
    status_code = 404
    error = "Not Found"

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"{entity} not found")


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message},
    )


def error_messages(errors: Iterable[dict]) -> List[str]:
    """
    Turn pydantic error dicts into readable messages.

    Field errors read "<camelCase path>: <msg>"; model-level checks (raised
    as ValueError in a model validator) keep just their own text.
    """
    messages = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        where = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        if err.get("type") == "value_error":
            msg = msg.removeprefix("Value error, ")
        messages.append(f"{where}: {msg}" if where else msg)
    return messages or ["Invalid request"]


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to the FastAPI app."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.error, exc.message)
        return error_response(exc.status_code, exc.error, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = ", ".join(error_messages(exc.errors()))
        logger.info("%s %s -> Validation Error: %s", request.method, request.url.path, message)
        return error_response(400, ValidationError.error, message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "Server Error", "Internal server error")
