"""Tests for API key authentication."""
import pytest
from httpx import AsyncClient, ASGITransport
from analytics_ingest.auth.api_key import ApiKeyMiddleware, is_public_path
from conftest import TEST_API_KEY

EVENT_BODY = {"eventName": "user.login", "timestamp": "2024-01-01T00:00:00Z"}


@pytest.mark.asyncio
async def test_valid_api_key_allows_access(app):
    """Test that a valid API key allows access to protected endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/v1/ingest/events",
            json=EVENT_BODY,
            headers={"X-API-Key": TEST_API_KEY},
        )
        assert response.status_code == 200


@pytest.mark.asyncio
async def test_missing_key_rejected(app):
    """Test that requests without a key are rejected."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/v1/ingest/events", json=EVENT_BODY)
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or missing API key"}


@pytest.mark.asyncio
async def test_api_key_case_sensitive(app):
    """Test that API keys are case-sensitive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/v1/ingest/events",
            json=EVENT_BODY,
            headers={"X-API-Key": TEST_API_KEY.upper()},
        )
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_empty_key_rejected(app):
    """Test that an empty header value is rejected."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/v1/ingest/metrics",
            json={"metricName": "m", "value": 1, "timestamp": "2024-01-01T00:00:00Z"},
            headers={"X-API-Key": ""},
        )
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_non_api_path_not_gated(app):
    """Test that paths outside /api/ are not subject to the key check."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/does-not-exist")
        assert response.status_code == 404


def test_validate():
    """Test key comparison."""
    middleware = ApiKeyMiddleware(app=None, api_key="secret")

    assert middleware.validate("secret") is True
    assert middleware.validate("Secret") is False
    assert middleware.validate("") is False
    assert middleware.validate(None) is False


@pytest.mark.parametrize(
    "path,public",
    [
        ("/health", True),
        ("/health/ready", True),
        ("/metrics", True),
        ("/docs", True),
        ("/openapi.json", True),
        ("/api/v1/ingest/events", False),
    ],
)
def test_public_paths(path, public):
    """Test which paths bypass authentication."""
    assert is_public_path(path) is public
