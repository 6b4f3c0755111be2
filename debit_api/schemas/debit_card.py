"""
Pydantic schemas for Debit Card endpoints.

Request bodies only declare the fields a caller may set. Anything else in
the body (expiration_date, user_id, number, ...) is ignored by pydantic's
default extra="ignore", so those values can never reach the model.

is_active on update is a StrictBool: JSON true/false only. Strings like
"true" or "yes" and integers are rejected with a validation error.
"""

from datetime import datetime

from pydantic import BaseModel, Field, StrictBool, StrictStr, field_serializer

from debit_api.models.debit_card import as_utc

EXPIRATION_FORMAT = "%Y-%m-%d %H:%M:%S"


class DebitCardCreateRequest(BaseModel):
    """Request body for POST /debit-cards."""
    type: StrictStr = Field(min_length=1, max_length=100)


class DebitCardUpdateRequest(BaseModel):
    """Request body for PUT/PATCH /debit-cards/{id}."""
    is_active: StrictBool


class DebitCardResponse(BaseModel):
    """Public representation of a debit card."""
    id: int
    number: str
    type: str
    expiration_date: datetime
    is_active: bool

    model_config = {"from_attributes": True}

    @field_serializer("expiration_date")
    def format_expiration_date(self, value: datetime) -> str:
        return as_utc(value).strftime(EXPIRATION_FORMAT)
