"""
Custom exception classes and FastAPI exception handlers.

The service layer raises domain errors (like DebitCardHasTransactionsError)
without importing HTTP concepts. The handlers registered here translate
them into HTTP responses, so:
  - Service code is testable without HTTP
  - Error responses are consistent across all endpoints

Exception hierarchy:
    DebitCardAPIError (base)
    ├── DebitCardNotFoundError             — absent, deleted, or owned by someone else
    ├── DebitCardHasTransactionsError      — delete blocked by dependent transactions
    ├── DebitCardInactiveError             — card cannot be charged
    ├── DebitCardTransactionNotFoundError  — transaction absent or not visible
    ├── DuplicateEmailError                — signup with a registered email
    └── InvalidCredentialsError            — bad login

Request validation failures are rendered in a single shape for every
endpoint:

    {"message": "The given data was invalid.",
     "errors": {"is_active": ["The is active field must be true or false."]}}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "The given data was invalid."


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class DebitCardAPIError(Exception):
    """Base exception for all Debit Cards API domain errors."""

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class DebitCardNotFoundError(DebitCardAPIError):
    """
    Raised when a debit card is not visible to the caller.

    A card that does not exist, has been deleted, or belongs to another
    user all raise this same error, so callers cannot probe for ids.
    """

    def __init__(self, debit_card_id: int):
        self.debit_card_id = debit_card_id
        super().__init__(f"Debit card {debit_card_id} not found")


class DebitCardHasTransactionsError(DebitCardAPIError):
    """Raised when deleting a debit card that has transactions recorded against it."""

    def __init__(self, debit_card_id: int):
        self.debit_card_id = debit_card_id
        super().__init__(
            f"Debit card {debit_card_id} has transactions and cannot be deleted"
        )


class DebitCardInactiveError(DebitCardAPIError):
    """Raised when recording a transaction on a disabled or expired card."""

    def __init__(self, debit_card_id: int):
        self.debit_card_id = debit_card_id
        super().__init__(f"Debit card {debit_card_id} is not active")


class DebitCardTransactionNotFoundError(DebitCardAPIError):
    """Raised when a transaction does not exist or its card is not visible."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Debit card transaction {transaction_id} not found")


class DuplicateEmailError(DebitCardAPIError):
    """Raised when attempting to register with an email that's already in use."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email {email} is already registered")


class InvalidCredentialsError(DebitCardAPIError):
    """Raised when login credentials are incorrect."""

    def __init__(self):
        super().__init__("Invalid email or password")


# ---------------------------------------------------------------------------
# Validation error formatting
# ---------------------------------------------------------------------------

def _field_name(loc: tuple, error_type: str = "") -> str:
    # A malformed JSON body reports ("body", <offset>)
    if error_type == "json_invalid":
        return "body"
    # loc is ("body", "is_active") for body fields, ("query", "x") for params
    parts = [str(part) for part in loc[1:]] or [str(part) for part in loc]
    return ".".join(parts)


def _field_message(field: str, error: dict) -> str:
    label = field.replace("_", " ")
    error_type = error.get("type", "")

    if error_type == "json_invalid":
        return "The request body must be valid JSON."
    if error_type == "missing":
        return f"The {label} field is required."
    if error_type.startswith("bool"):
        return f"The {label} field must be true or false."
    if error_type.startswith("string_type"):
        return f"The {label} field must be a string."
    if error_type.startswith("int"):
        return f"The {label} field must be an integer."
    return f"The {label} field is invalid: {error.get('msg', 'invalid value')}."


def format_validation_errors(errors: list[dict]) -> dict[str, list[str]]:
    """
    Group pydantic errors by field into human-readable messages.

    Args:
        errors: The list returned by RequestValidationError.errors().

    Returns:
        Mapping of field name to the messages for that field, in the
        order pydantic reported them.
    """
    grouped: dict[str, list[str]] = {}
    for error in errors:
        field = _field_name(tuple(error.get("loc", ())), error.get("type", ""))
        grouped.setdefault(field, []).append(_field_message(field, error))
    return grouped


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Domain errors map to {"detail": ..., "error_type": ...}. Request
    validation errors map to {"message": ..., "errors": {...}}.

    This is called once during app startup in main.py.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = format_validation_errors(exc.errors())
        logger.info(
            "Validation failed on %s %s: %s",
            request.method, request.url.path, sorted(errors),
        )
        return JSONResponse(
            status_code=422,
            content={"message": VALIDATION_MESSAGE, "errors": errors},
        )

    @app.exception_handler(DebitCardNotFoundError)
    async def debit_card_not_found_handler(
        request: Request, exc: DebitCardNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"detail": exc.detail, "error_type": "debit_card_not_found"},
        )

    @app.exception_handler(DebitCardHasTransactionsError)
    async def debit_card_has_transactions_handler(
        request: Request, exc: DebitCardHasTransactionsError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=403,  # The owner is known; the action is refused
            content={"detail": exc.detail, "error_type": "debit_card_has_transactions"},
        )

    @app.exception_handler(DebitCardInactiveError)
    async def debit_card_inactive_handler(
        request: Request, exc: DebitCardInactiveError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": exc.detail, "error_type": "debit_card_inactive"},
        )

    @app.exception_handler(DebitCardTransactionNotFoundError)
    async def transaction_not_found_handler(
        request: Request, exc: DebitCardTransactionNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={
                "detail": exc.detail,
                "error_type": "debit_card_transaction_not_found",
            },
        )

    @app.exception_handler(DuplicateEmailError)
    async def duplicate_email_handler(
        request: Request, exc: DuplicateEmailError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=409,
            content={"detail": exc.detail, "error_type": "duplicate_email"},
        )

    @app.exception_handler(InvalidCredentialsError)
    async def invalid_credentials_handler(
        request: Request, exc: InvalidCredentialsError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={"detail": exc.detail, "error_type": "invalid_credentials"},
        )
