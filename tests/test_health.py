"""Tests for health, root and metrics endpoints."""

from unittest.mock import MagicMock

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Test basic health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert "environment" in data


@pytest.mark.asyncio
async def test_detailed_health_check(client: AsyncClient) -> None:
    """Test detailed health check endpoint."""
    response = await client.get("/api/health/detailed")
    assert response.status_code == 200
    data = response.json()
    assert data["database"] == "healthy"
    assert data["redis"] == "healthy"
    assert data["status"] == "healthy"


@pytest.mark.asyncio
async def test_detailed_health_reports_redis_outage(
    client: AsyncClient,
    redis_mock: MagicMock,
) -> None:
    redis_mock.ping.side_effect = ConnectionError("redis down")

    response = await client.get("/api/health/detailed")
    assert response.status_code == 200
    assert response.json()["redis"] == "unhealthy"
    assert response.json()["status"] == "degraded"


@pytest.mark.asyncio
async def test_ping(client: AsyncClient) -> None:
    """Test ping endpoint."""
    response = await client.get("/api/ping")
    assert response.status_code == 200
    assert response.json() == {"message": "pong"}


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient) -> None:
    """Test root endpoint."""
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["message"].startswith("Welcome to")


@pytest.mark.asyncio
async def test_request_headers(client: AsyncClient) -> None:
    response = await client.get("/api/ping")
    assert response.headers["X-Request-ID"]
    assert float(response.headers["X-Process-Time"]) >= 0


@pytest.mark.asyncio
async def test_unknown_route(client: AsyncClient) -> None:
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["path"] == "/api/does-not-exist"


@pytest.mark.asyncio
async def test_metrics_endpoint(client: AsyncClient) -> None:
    await client.get("/api/ping")
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text
