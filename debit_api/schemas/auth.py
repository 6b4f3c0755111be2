"""Request and response bodies for /auth."""

import uuid

from pydantic import BaseModel, EmailStr, Field


class UserSignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=255)


class UserLoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Bearer token accepted by every /debit-cards endpoint."""
    token: str
    token_type: str = "bearer"


class SignupResponse(TokenResponse):
    """The new cardholder's id alongside their first token."""
    user_id: uuid.UUID
    email: str
