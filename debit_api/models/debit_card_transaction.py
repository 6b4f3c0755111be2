"""
DebitCardTransaction model — a charge recorded against a debit card.

Transactions are what pin a card in place: while at least one row here
references a card, that card cannot be deleted.

amount is an integer in the currency's minor unit, always positive.
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from debit_api.database import Base


# Currencies the card processor settles in
CURRENCY_CODES = ("IDR", "SGD", "THB", "VND")


class DebitCardTransaction(Base):
    __tablename__ = "debit_card_transactions"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_debit_card_transactions_positive_amount"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    debit_card_id: Mapped[int] = mapped_column(
        ForeignKey("debit_cards.id"),
        nullable=False,
        index=True,
    )

    amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # ISO 4217 code, one of CURRENCY_CODES
    currency_code: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    # --- Relationships ---
    debit_card: Mapped["DebitCard"] = relationship(
        back_populates="debit_card_transactions",
    )
