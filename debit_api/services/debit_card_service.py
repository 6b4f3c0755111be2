"""
Debit card service — issuance, lookup, activation, and soft deletion.

Every operation takes an explicit AuthContext and resolves cards through
the ownership predicate in `scoping`, so a card that belongs to someone
else behaves exactly like a card that does not exist.

Issuance:
  1. A 16-digit card number is randomly generated
  2. The number is encrypted with Fernet before storage
  3. Expiration is set to one calendar year from now (Feb 29 -> Mar 1)
  4. The card starts ACTIVE (disabled_at is NULL)

State transitions (see CardState):
    ACTIVE   -> DISABLED   set_active(False)
    DISABLED -> ACTIVE     set_active(True)
    ACTIVE | DISABLED -> DELETED   delete_debit_card(), only without transactions
  Repeating a transition is a no-op. DELETED is terminal: deleted cards are
  outside the ownership predicate, so nothing can reach them again.

Delete guard:
  The soft-delete is a single conditional UPDATE that only matches a
  visible card with no transactions. Zero rows matched means the guard
  refused the delete, or the card stopped being visible in between.
"""

import logging
import random
from datetime import datetime, timezone

from sqlalchemy import exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from debit_api.dependencies import AuthContext
from debit_api.exceptions import DebitCardHasTransactionsError, DebitCardNotFoundError
from debit_api.models.debit_card import CardState, DebitCard
from debit_api.models.debit_card_transaction import DebitCardTransaction
from debit_api.security import encrypt_value
from debit_api.services import debit_card_transaction_service
from debit_api.services.scoping import get_visible_debit_card, visible_to

logger = logging.getLogger(__name__)


def _generate_card_number() -> str:
    """Generate a random 16-digit card number starting with "4" (Visa-like)."""
    return "4" + "".join([str(random.randint(0, 9)) for _ in range(15)])


def one_year_from(moment: datetime) -> datetime:
    """Same instant one calendar year later; Feb 29 rolls over to Mar 1."""
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        return moment.replace(year=moment.year + 1, month=3, day=1)


def apply_transition(card: DebitCard, target: CardState, now: datetime) -> None:
    """
    Move a card between ACTIVE and DISABLED by writing disabled_at.

    Re-disabling keeps the original disabled_at. Deletion goes through
    delete_debit_card only.
    """
    if target is CardState.ACTIVE:
        card.disabled_at = None
    elif target is CardState.DISABLED:
        if card.disabled_at is None:
            card.disabled_at = now


async def list_debit_cards(db: AsyncSession, auth: AuthContext) -> list[DebitCard]:
    """List the caller's non-deleted debit cards, oldest first."""
    result = await db.execute(
        select(DebitCard).where(visible_to(auth)).order_by(DebitCard.id)
    )
    return list(result.scalars().all())


async def create_debit_card(
    db: AsyncSession,
    auth: AuthContext,
    card_type: str,
) -> DebitCard:
    """
    Issue a new debit card to the caller.

    Only the type comes from the request; owner, number, and expiration
    are decided here.

    Returns:
        The created DebitCard instance.
    """
    now = datetime.now(timezone.utc)
    card = DebitCard(
        user_id=auth.user_id,
        number_encrypted=encrypt_value(_generate_card_number()),
        type=card_type,
        expiration_date=one_year_from(now),
        disabled_at=None,
    )
    db.add(card)
    await db.flush()

    logger.info("Issued debit card %s to user %s", card.id, auth.user_id)
    return card


async def get_debit_card(
    db: AsyncSession,
    debit_card_id: int,
    auth: AuthContext,
) -> DebitCard:
    """
    Get one of the caller's debit cards.

    Raises:
        DebitCardNotFoundError: If the card is absent, deleted, or not owned
            by the caller.
    """
    return await get_visible_debit_card(db, debit_card_id, auth)


async def set_active(
    db: AsyncSession,
    debit_card_id: int,
    auth: AuthContext,
    is_active: bool,
) -> DebitCard:
    """
    Activate (is_active=True) or deactivate (is_active=False) a card.

    Activation clears disabled_at; deactivation stamps it with the current
    time. Either is idempotent.

    Raises:
        DebitCardNotFoundError: If the card is not visible to the caller.
    """
    card = await get_visible_debit_card(db, debit_card_id, auth)

    target = CardState.ACTIVE if is_active else CardState.DISABLED
    previous = card.state
    apply_transition(card, target, datetime.now(timezone.utc))
    await db.flush()

    if previous is not target:
        logger.info(
            "Debit card %s moved %s -> %s", card.id, previous.value, target.value
        )
    return card


async def delete_debit_card(
    db: AsyncSession,
    debit_card_id: int,
    auth: AuthContext,
) -> None:
    """
    Soft-delete one of the caller's debit cards.

    Raises:
        DebitCardNotFoundError: If the card is not visible to the caller.
        DebitCardHasTransactionsError: If any transaction references the
            card; the card is left untouched.
    """
    card = await get_visible_debit_card(db, debit_card_id, auth, for_update=True)

    # The transaction check is evaluated by the same statement that writes
    result = await db.execute(
        update(DebitCard)
        .where(
            DebitCard.id == card.id,
            visible_to(auth),
            ~exists().where(DebitCardTransaction.debit_card_id == DebitCard.id),
        )
        .values(deleted_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        if await debit_card_transaction_service.exists_for(db, card.id):
            logger.warning(
                "Refused to delete debit card %s: transactions exist", card.id
            )
            raise DebitCardHasTransactionsError(card.id)
        raise DebitCardNotFoundError(card.id)

    await db.refresh(card)
    logger.info("Deleted debit card %s", card.id)
