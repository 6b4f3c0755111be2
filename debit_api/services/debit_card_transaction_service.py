"""
Debit card transaction service.

Two roles:
  - `exists_for()` is the lookup the debit card delete guard relies on
  - list/create/get back the /debit-card-transactions endpoints

A transaction is visible exactly when its card is visible, so every path
goes through the debit card ownership predicate first. A disabled or
expired card can't be charged.
"""

import logging

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from debit_api.dependencies import AuthContext
from debit_api.exceptions import DebitCardInactiveError, DebitCardTransactionNotFoundError
from debit_api.models.debit_card import DebitCard
from debit_api.models.debit_card_transaction import DebitCardTransaction
from debit_api.services.scoping import get_visible_debit_card, visible_to

logger = logging.getLogger(__name__)


async def exists_for(db: AsyncSession, debit_card_id: int) -> bool:
    """Return True if any transaction references the debit card."""
    return bool(
        await db.scalar(
            select(
                exists().where(DebitCardTransaction.debit_card_id == debit_card_id)
            )
        )
    )


async def list_transactions(
    db: AsyncSession,
    auth: AuthContext,
    debit_card_id: int,
) -> list[DebitCardTransaction]:
    """
    List the transactions of one of the caller's debit cards, oldest first.

    Raises:
        DebitCardNotFoundError: If the card is not visible to the caller.
    """
    card = await get_visible_debit_card(db, debit_card_id, auth)

    result = await db.execute(
        select(DebitCardTransaction)
        .where(DebitCardTransaction.debit_card_id == card.id)
        .order_by(DebitCardTransaction.id)
    )
    return list(result.scalars().all())


async def create_transaction(
    db: AsyncSession,
    auth: AuthContext,
    debit_card_id: int,
    amount: int,
    currency_code: str,
) -> DebitCardTransaction:
    """
    Record a transaction against one of the caller's debit cards.

    Raises:
        DebitCardNotFoundError: If the card is not visible to the caller.
        DebitCardInactiveError: If the card is disabled or expired.
    """
    card = await get_visible_debit_card(db, debit_card_id, auth, for_update=True)
    if not card.is_active:
        logger.warning("Rejected transaction on inactive debit card %s", card.id)
        raise DebitCardInactiveError(card.id)

    transaction = DebitCardTransaction(
        debit_card_id=card.id,
        amount=amount,
        currency_code=currency_code,
    )
    db.add(transaction)
    await db.flush()

    # SQLite takes no lock on the SELECT above; once the row is written
    # the card must still be visible or the whole charge rolls back
    await get_visible_debit_card(db, card.id, auth)

    logger.info(
        "Recorded transaction %s on debit card %s (%s %s)",
        transaction.id, card.id, amount, currency_code,
    )
    return transaction


async def get_transaction(
    db: AsyncSession,
    auth: AuthContext,
    transaction_id: int,
) -> DebitCardTransaction:
    """
    Get a single transaction whose card is visible to the caller.

    Raises:
        DebitCardTransactionNotFoundError: If the transaction doesn't exist
            or belongs to a card the caller can't see.
    """
    result = await db.execute(
        select(DebitCardTransaction)
        .join(DebitCard, DebitCardTransaction.debit_card_id == DebitCard.id)
        .where(DebitCardTransaction.id == transaction_id, visible_to(auth))
    )
    transaction = result.scalar_one_or_none()
    if transaction is None:
        raise DebitCardTransactionNotFoundError(transaction_id)
    return transaction
