"""
Debit cards router — the owner-facing debit card resource.

Endpoints:
  GET       /debit-cards       — List your debit cards
  POST      /debit-cards       — Issue a new debit card
  GET       /debit-cards/{id}  — Get one of your debit cards
  PUT/PATCH /debit-cards/{id}  — Activate or deactivate a card
  DELETE    /debit-cards/{id}  — Soft-delete a card without transactions

Cards belonging to other users answer 404, the same as ids that don't
exist.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from debit_api.database import get_db
from debit_api.dependencies import AuthContext, get_auth_context
from debit_api.schemas.debit_card import (
    DebitCardCreateRequest,
    DebitCardResponse,
    DebitCardUpdateRequest,
)
from debit_api.services import debit_card_service

router = APIRouter()


@router.get(
    "",
    response_model=list[DebitCardResponse],
    summary="List your debit cards",
)
async def list_debit_cards(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """List all non-deleted debit cards owned by the authenticated user."""
    return await debit_card_service.list_debit_cards(db, auth)


@router.post(
    "",
    response_model=DebitCardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a debit card",
)
async def create_debit_card(
    request: DebitCardCreateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Issue a new debit card to the authenticated user.

    - **type**: Card type label, e.g. "visa"

    The number is generated, and the card expires one year from now.
    Any other fields in the body are ignored.
    """
    return await debit_card_service.create_debit_card(
        db=db,
        auth=auth,
        card_type=request.type,
    )


@router.get(
    "/{debit_card_id}",
    response_model=DebitCardResponse,
    summary="Get debit card details",
)
async def get_debit_card(
    debit_card_id: int,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Get a debit card. Returns 404 unless the card is yours and not deleted."""
    return await debit_card_service.get_debit_card(db, debit_card_id, auth)


@router.api_route(
    "/{debit_card_id}",
    methods=["PUT", "PATCH"],
    response_model=DebitCardResponse,
    summary="Activate or deactivate a debit card",
)
async def update_debit_card(
    debit_card_id: int,
    request: DebitCardUpdateRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Set whether a debit card is active.

    - **is_active**: JSON boolean, required. `false` disables the card,
      `true` re-enables it.
    """
    return await debit_card_service.set_active(
        db=db,
        debit_card_id=debit_card_id,
        auth=auth,
        is_active=request.is_active,
    )


@router.delete(
    "/{debit_card_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a debit card",
)
async def delete_debit_card(
    debit_card_id: int,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Soft-delete a debit card.

    Refused with 403 while any transaction references the card.
    """
    await debit_card_service.delete_debit_card(db, debit_card_id, auth)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
