"""
Tests for the general API routes and request tracing.
"""

import pytest


@pytest.mark.asyncio
async def test_health_endpoint(app_client):
    async with app_client as client:
        response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "fleet-analytics"
    assert "version" in data
    assert data["details"]["max_concurrent_drivers"] >= 1


@pytest.mark.asyncio
async def test_trace_id_is_generated(app_client):
    async with app_client as client:
        response = await client.get("/health")

    trace_id = response.headers["X-Trace-Id"]
    assert len(trace_id) == 32


@pytest.mark.asyncio
async def test_trace_id_is_propagated(app_client):
    async with app_client as client:
        response = await client.get("/health", headers={"X-Trace-Id": "abc123"})

    assert response.headers["X-Trace-Id"] == "abc123"


@pytest.mark.asyncio
async def test_analytics_health(app_client):
    async with app_client as client:
        response = await client.get("/analytics/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["service"] == "analytics"
