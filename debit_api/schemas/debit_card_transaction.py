"""
Pydantic schemas for Debit Card Transaction endpoints.

Amounts are positive integers in the currency's minor unit.
"""

from typing import Literal

from pydantic import BaseModel, Field


class DebitCardTransactionCreateRequest(BaseModel):
    """Request body for POST /debit-card-transactions."""
    debit_card_id: int
    amount: int = Field(gt=0, description="Amount in minor units (must be positive)")
    currency_code: Literal["IDR", "SGD", "THB", "VND"]


class DebitCardTransactionResponse(BaseModel):
    """Public representation of a debit card transaction."""
    id: int
    debit_card_id: int
    amount: int
    currency_code: str

    model_config = {"from_attributes": True}
