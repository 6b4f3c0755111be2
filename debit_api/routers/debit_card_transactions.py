"""
Debit card transactions router.

Endpoints:
  GET  /debit-card-transactions?debit_card_id={id} — List a card's transactions
  POST /debit-card-transactions                    — Record a transaction
  GET  /debit-card-transactions/{id}               — Get a transaction

Only the owner of the card can see or create its transactions.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from debit_api.database import get_db
from debit_api.dependencies import AuthContext, get_auth_context
from debit_api.schemas.debit_card_transaction import (
    DebitCardTransactionCreateRequest,
    DebitCardTransactionResponse,
)
from debit_api.services import debit_card_transaction_service

router = APIRouter()


@router.get(
    "",
    response_model=list[DebitCardTransactionResponse],
    summary="List transactions for a debit card",
)
async def list_transactions(
    debit_card_id: int = Query(..., description="The debit card to list transactions for"),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """List transactions recorded against one of your debit cards."""
    return await debit_card_transaction_service.list_transactions(
        db=db,
        auth=auth,
        debit_card_id=debit_card_id,
    )


@router.post(
    "",
    response_model=DebitCardTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a debit card transaction",
)
async def create_transaction(
    request: DebitCardTransactionCreateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Record a transaction on one of your active debit cards.

    - **debit_card_id**: The card being charged
    - **amount**: Positive integer, minor units
    - **currency_code**: One of IDR, SGD, THB, VND
    """
    return await debit_card_transaction_service.create_transaction(
        db=db,
        auth=auth,
        debit_card_id=request.debit_card_id,
        amount=request.amount,
        currency_code=request.currency_code,
    )


@router.get(
    "/{transaction_id}",
    response_model=DebitCardTransactionResponse,
    summary="Get a debit card transaction",
)
async def get_transaction(
    transaction_id: int,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Get a transaction recorded against one of your debit cards."""
    return await debit_card_transaction_service.get_transaction(
        db=db,
        auth=auth,
        transaction_id=transaction_id,
    )
