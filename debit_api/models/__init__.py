"""
SQLAlchemy ORM models package.

All models are imported here so that:
  1. Base.metadata knows every table before create_all() runs
  2. String-based relationship targets ("DebitCard", ...) resolve
"""

from debit_api.models.user import User  # noqa: F401
from debit_api.models.debit_card import CardState, DebitCard  # noqa: F401
from debit_api.models.debit_card_transaction import DebitCardTransaction  # noqa: F401
