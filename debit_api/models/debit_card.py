"""
DebitCard model — a card issued to a user.

Stored state is two nullable timestamps:
  - disabled_at: set when the owner deactivates the card, cleared when they
    reactivate it
  - deleted_at: soft-delete marker; the row stays for audit purposes but is
    invisible to every owner-facing path

The pair is read through `state` as one of three tagged states:

    ACTIVE   (disabled_at is NULL, deleted_at is NULL)
    DISABLED (disabled_at set,     deleted_at is NULL)
    DELETED  (deleted_at set)      — terminal

`is_active` additionally requires the card to be unexpired. Expiry never
writes disabled_at; it only changes what `is_active` reports.

The card number is Fernet-encrypted at rest and decrypted on read through
the `number` property.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column, relationship

from debit_api.database import Base
from debit_api.security import decrypt_value


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class CardState(str, enum.Enum):
    """Observable lifecycle state of a debit card."""
    ACTIVE = "active"
    DISABLED = "disabled"
    DELETED = "deleted"


class DebitCard(Base):
    __tablename__ = "debit_cards"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # Owner, bound from the AuthContext at creation and never changed
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # Full card number, Fernet-encrypted
    number_encrypted: Mapped[bytes] = mapped_column(
        LargeBinary,
        nullable=False,
    )

    # Free-form label supplied by the owner ("visa", "mastercard", ...)
    type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Fixed at issuance to one year out
    expiration_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    disabled_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # --- Relationships ---
    user: Mapped["User"] = relationship(
        back_populates="debit_cards",
    )

    debit_card_transactions: Mapped[list["DebitCardTransaction"]] = relationship(
        back_populates="debit_card",
    )

    @property
    def number(self) -> str:
        return decrypt_value(self.number_encrypted)

    @property
    def state(self) -> CardState:
        if self.deleted_at is not None:
            return CardState.DELETED
        if self.disabled_at is not None:
            return CardState.DISABLED
        return CardState.ACTIVE

    @property
    def is_expired(self) -> bool:
        return as_utc(self.expiration_date) <= datetime.now(timezone.utc)

    @property
    def is_active(self) -> bool:
        return self.state is CardState.ACTIVE and not self.is_expired
