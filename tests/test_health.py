"""
Tests for health check endpoints.
"""
from unittest.mock import patch
from sqlalchemy.exc import OperationalError


def test_health_liveness(client):
    """Test liveness health check."""
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["service"] == "analytics-ingest"
    assert data["version"] == "0.1.0"
    assert "timestamp" in data


def test_health_readiness(client):
    """Test readiness health check."""
    r = client.get("/health/ready")
    # Should be 200 (ready) or 503 (not ready)
    assert r.status_code in [200, 503]
    data = r.json()
    assert data["service"] == "analytics-ingest"
    assert "checks" in data
    assert data["checks"]["database"]["status"] == "ok"


def test_health_readiness_database_down(client, app):
    """Test that an unreachable database makes the service not ready."""
    error = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with patch.object(app.state.database, "ping", side_effect=error):
        r = client.get("/health/ready")

    assert r.status_code == 503
    data = r.json()
    assert data["status"] == "not_ready"
    assert data["checks"]["database"]["status"] == "error"


def test_health_does_not_require_api_key(client):
    """Test that health endpoints bypass authentication."""
    assert client.get("/health").status_code == 200
    assert client.get("/health/ready").status_code != 401


def test_metrics_endpoint(client, auth_headers):
    """Test Prometheus metrics endpoint."""
    client.post(
        "/api/v1/ingest/metrics",
        json={"metricName": "cpu.usage", "value": 1.0, "timestamp": "2024-01-01T00:00:00Z"},
        headers=auth_headers,
    )

    r = client.get("/metrics")
    assert r.status_code == 200
    content = r.text
    assert "http_requests_total" in content
    assert "http_request_duration_seconds" in content
    assert "app_up" in content
    assert 'ingest_records_total{kind="metric"} 1.0' in content


def test_docs_do_not_require_api_key(client):
    """Test that the OpenAPI schema is public."""
    r = client.get("/openapi.json")
    assert r.status_code == 200
    assert "/api/v1/ingest/events" in r.json()["paths"]


def test_correlation_id_in_response(client):
    """Test that correlation ID is added to response headers."""
    r = client.get("/health")
    assert "x-correlation-id" in r.headers


def test_correlation_id_propagation(client):
    """Test that provided correlation ID is propagated."""
    correlation_id = "test-correlation-id-123"
    r = client.get("/health", headers={"x-correlation-id": correlation_id})
    assert r.headers["x-correlation-id"] == correlation_id
