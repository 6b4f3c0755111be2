"""
Test fixtures for the Debit Cards API test suite.

Shared fixtures:

  - db_engine / session_factory / db_session: Fresh in-memory SQLite
    database for each test
  - client: Async HTTP test client (unauthenticated)
  - user / other_user: Registered users, each with their own auth headers
  - make_debit_card: Seeds a card straight into the database, including
    states the API can't produce on its own (expired cards, pre-disabled
    cards, cards with transactions)
  - load_debit_card: Reads a card back in a fresh session, bypassing the
    ownership predicate, to inspect the stored timestamps

Key design decisions:
  - In-memory SQLite with a StaticPool: every session in a test shares the
    one connection, so rows written by the seed fixtures are visible to
    requests made through the client and vice versa.
  - FastAPI's get_db dependency is overridden so the application code runs
    exactly as it does in production, against the test database.
  - Users are created through the real signup endpoint. Requests pass
    auth headers explicitly, so two users can share one client.
"""

import os

from cryptography.fernet import Fernet

# Settings are read at import time; these must exist before debit_api loads
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("CARD_ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import random  # noqa: E402
import uuid  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from debit_api.database import Base, get_db  # noqa: E402
from debit_api.main import app  # noqa: E402
from debit_api.models.debit_card import DebitCard  # noqa: E402
from debit_api.models.debit_card_transaction import DebitCardTransaction  # noqa: E402
from debit_api.security import encrypt_value  # noqa: E402
from debit_api.services.debit_card_service import one_year_from  # noqa: E402


TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Provide an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """
    Async HTTP test client with the test database injected.

    Overrides the get_db dependency so all requests hit the in-memory
    test database instead of the real one.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


async def _register(client: AsyncClient, email: str, name: str) -> dict:
    response = await client.post(
        "/auth/signup",
        json={"email": email, "password": "SecurePass123!", "name": name},
    )
    assert response.status_code == 201, f"Signup failed: {response.text}"
    data = response.json()
    return {
        "id": uuid.UUID(data["user_id"]),
        "email": email,
        "headers": {"Authorization": f"Bearer {data['token']}"},
    }


@pytest_asyncio.fixture
async def user(client):
    """The primary test user: {"id", "email", "headers"}."""
    return await _register(client, "cardholder@example.com", "Card Holder")


@pytest_asyncio.fixture
async def other_user(client):
    """A second user for cross-user isolation tests."""
    return await _register(client, "someone.else@example.com", "Someone Else")


@pytest_asyncio.fixture
async def make_debit_card(session_factory):
    """
    Seed a debit card directly in the database.

    Usage:
        card = await make_debit_card(user["id"])
        card = await make_debit_card(user["id"], disabled=True)
        card = await make_debit_card(user["id"], expired=True)
        card = await make_debit_card(user["id"], transactions=2)
    """

    async def _make(
        user_id: uuid.UUID,
        *,
        card_type: str = "visa",
        disabled: bool = False,
        expired: bool = False,
        deleted: bool = False,
        transactions: int = 0,
    ) -> DebitCard:
        now = datetime.now(timezone.utc)
        number = "4" + "".join(str(random.randint(0, 9)) for _ in range(15))
        card = DebitCard(
            user_id=user_id,
            number_encrypted=encrypt_value(number),
            type=card_type,
            expiration_date=now - timedelta(days=1) if expired else one_year_from(now),
            disabled_at=now if disabled else None,
            deleted_at=now if deleted else None,
        )
        async with session_factory() as session:
            session.add(card)
            await session.flush()
            for i in range(transactions):
                session.add(
                    DebitCardTransaction(
                        debit_card_id=card.id,
                        amount=1000 * (i + 1),
                        currency_code="SGD",
                    )
                )
            await session.commit()
        return card

    return _make


@pytest_asyncio.fixture
async def load_debit_card(session_factory):
    """Read a card's stored row in a fresh session (no ownership filter)."""

    async def _load(debit_card_id: int) -> DebitCard | None:
        async with session_factory() as session:
            return await session.get(DebitCard, debit_card_id)

    return _load
