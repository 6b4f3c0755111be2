"""Tests for the health check endpoint."""

from debit_api.config import settings


async def test_health_check(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": settings.APP_VERSION}
