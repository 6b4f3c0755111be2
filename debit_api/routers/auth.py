"""
Cardholder signup and login.

Both endpoints are open; they hand out the bearer tokens that
get_auth_context turns into an AuthContext on the card endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from debit_api.database import get_db
from debit_api.schemas.auth import (
    UserSignupRequest,
    UserLoginRequest,
    TokenResponse,
    SignupResponse,
)
from debit_api.services import auth_service

router = APIRouter()


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a cardholder",
)
async def signup(
    request: UserSignupRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create the cardholder and return a token for them."""
    user, token = await auth_service.signup(
        db=db,
        email=request.email,
        password=request.password,
        name=request.name,
    )
    return SignupResponse(user_id=user.id, email=user.email, token=token)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Exchange credentials for a token",
)
async def login(
    request: UserLoginRequest,
    db: AsyncSession = Depends(get_db),
):
    _, token = await auth_service.login(
        db=db,
        email=request.email,
        password=request.password,
    )
    return TokenResponse(token=token)
