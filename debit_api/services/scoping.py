"""
Ownership scoping for debit card queries.

Every owner-facing read or write of a debit card starts from
`visible_to(auth)`. A card is visible when:
  - its user_id is the AuthContext principal, and
  - it has not been soft-deleted.

There is no implicit query scope anywhere else. A card that fails the
predicate is treated exactly like a card that does not exist, so one
user can't learn whether another user's card id is real.
"""

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from debit_api.dependencies import AuthContext
from debit_api.exceptions import DebitCardNotFoundError
from debit_api.models.debit_card import DebitCard


def visible_to(auth: AuthContext):
    """SQL predicate selecting the debit cards the principal may see."""
    return and_(
        DebitCard.user_id == auth.user_id,
        DebitCard.deleted_at.is_(None),
    )


async def get_visible_debit_card(
    db: AsyncSession,
    debit_card_id: int,
    auth: AuthContext,
    for_update: bool = False,
) -> DebitCard:
    """
    Load a single debit card through the ownership predicate.

    Args:
        db: Database session.
        debit_card_id: The card to load.
        auth: The caller.
        for_update: Lock the row for the rest of the transaction
                    (no-op on SQLite, SELECT ... FOR UPDATE on PostgreSQL).

    Raises:
        DebitCardNotFoundError: If the card is absent, deleted, or owned by
            someone else.
    """
    stmt = select(DebitCard).where(DebitCard.id == debit_card_id, visible_to(auth))
    if for_update:
        stmt = stmt.with_for_update()

    result = await db.execute(stmt)
    card = result.scalar_one_or_none()
    if card is None:
        raise DebitCardNotFoundError(debit_card_id)
    return card
