"""
FastAPI application and entry point.

This module creates and configures the FastAPI application:
  1. Lifespan manager — handles startup/shutdown (DB table creation, cleanup)
  2. CORS middleware — allows frontend origins to make cross-origin requests
  3. Exception handlers — maps domain and validation errors to HTTP responses
  4. Router registration — mounts all API endpoint groups

Running locally:
    uvicorn debit_api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import debit_api.models  # noqa: F401  (registers every table on Base.metadata)
from debit_api.config import settings
from debit_api.database import engine, Base
from debit_api.exceptions import register_exception_handlers
from debit_api.logging_config import configure_logging
from debit_api.routers import auth, debit_card_transactions, debit_cards

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
      Configures logging and creates all database tables if they don't
      exist.

    Shutdown:
      Disposes of the database engine, closing all connections cleanly.
    """
    # --- Startup ---
    configure_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    # --- Shutdown ---
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Debit card management REST API",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(debit_cards.router, prefix="/debit-cards", tags=["Debit Cards"])
app.include_router(
    debit_card_transactions.router,
    prefix="/debit-card-transactions",
    tags=["Debit Card Transactions"],
)


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for deployment probes."""
    return {"status": "ok", "version": settings.APP_VERSION}
