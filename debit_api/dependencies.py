"""
FastAPI dependencies for authentication.

The dependency chain is:

  get_current_user (JWT -> User)
      └── get_auth_context (User -> AuthContext)

Services never look up "the current user" themselves. Routes resolve an
AuthContext here and pass it explicitly into every service call, so the
principal a service acts for is always visible in its signature and easy
to construct in tests.
"""

import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from debit_api.database import get_db
from debit_api.models.user import User
from debit_api.security import decode_access_token


# Reads the "Authorization: Bearer <token>" header. tokenUrl points Swagger
# UI's "Authorize" button at the login endpoint.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


@dataclass(frozen=True)
class AuthContext:
    """The authenticated principal a request acts on behalf of."""
    user_id: uuid.UUID


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Extract and validate the JWT token, then return the corresponding User.

    Raises:
        HTTPException 401: If the token is invalid, expired, or the user
            doesn't exist or is deactivated.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
        user_id_str: str | None = payload.get("sub")
        if user_id_str is None:
            raise credentials_exception
        user_id = uuid.UUID(user_id_str)
    except (JWTError, ValueError):
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise credentials_exception

    return user


async def get_auth_context(
    user: User = Depends(get_current_user),
) -> AuthContext:
    """Wrap the authenticated user's id in an AuthContext."""
    return AuthContext(user_id=user.id)
