"""Health and root endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health endpoint should return server status, version and database state."""
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_root_reports_running(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "active"


@pytest.mark.asyncio
async def test_unknown_route_returns_msg(client):
    resp = await client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json()["msg"].startswith("Route not found")
