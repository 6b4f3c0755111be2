"""
Authentication service — signup and login business logic.

Issues the bearer tokens that the AuthContext dependency later resolves.

Signup flow:
  1. Check if email is already registered
  2. Hash the password with Argon2id
  3. Create the User
  4. Return a JWT token so the user is immediately logged in

Login flow:
  1. Look up user by email
  2. Verify password against stored hash
  3. Return a JWT token

Login returns the same error for "wrong password" and "email not found"
so valid emails cannot be enumerated.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from debit_api.exceptions import DuplicateEmailError, InvalidCredentialsError
from debit_api.models.user import User
from debit_api.security import hash_password, verify_password, create_access_token

logger = logging.getLogger(__name__)


async def signup(
    db: AsyncSession,
    email: str,
    password: str,
    name: str,
) -> tuple[User, str]:
    """
    Register a new user.

    Args:
        db: Database session.
        email: User's email (must be unique).
        password: Plaintext password (hashed before storage).
        name: Display name.

    Returns:
        Tuple of (User instance, JWT token string).

    Raises:
        DuplicateEmailError: If the email is already registered.
    """
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        raise DuplicateEmailError(email)

    user = User(
        email=email,
        name=name,
        hashed_password=hash_password(password),
    )
    db.add(user)
    # Flush to get user.id assigned for the token subject
    await db.flush()

    logger.info("User %s signed up", user.id)
    token = create_access_token(data={"sub": str(user.id)})
    return user, token


async def login(
    db: AsyncSession,
    email: str,
    password: str,
) -> tuple[User, str]:
    """
    Authenticate a user and return a JWT token.

    Raises:
        InvalidCredentialsError: If email doesn't exist, the password is
            wrong, or the user is deactivated.
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    # Same error for every case so emails cannot be enumerated
    if not user:
        raise InvalidCredentialsError()

    if not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError()

    if not user.is_active:
        raise InvalidCredentialsError()

    token = create_access_token(data={"sub": str(user.id)})
    return user, token
