"""
Tests for the /health and / endpoints.
"""

import pytest


@pytest.mark.asyncio
async def test_health_returns_200(client):
    """Health endpoint must always return 200 if the API process is alive."""
    response = await client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_health_response_schema(client):
    data = (await client.get("/health")).json()

    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"
    assert data["environment"] == "test"


@pytest.mark.asyncio
async def test_health_reports_mock_mode(client):
    """Tests run with AI_MOCK_MODE=true, so no Gemini key is needed."""
    data = (await client.get("/health")).json()
    assert data["ai_mode"] == "mock"


@pytest.mark.asyncio
async def test_root_returns_metadata(client):
    data = (await client.get("/")).json()
    assert data["name"] == "TruthLens API"
    assert data["status"] == "running"


@pytest.mark.asyncio
async def test_mock_mode_in_production_logs_warning(client, monkeypatch, caplog):
    """A production deployment left in mock mode still answers 200 but is flagged in the logs."""
    import logging

    from truthlens.core.config import settings

    monkeypatch.setattr(settings, "environment", "production")
    with caplog.at_level(logging.WARNING, logger="truthlens.routes.health"):
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["ai_mode"] == "mock"
    assert "mock" in caplog.text


@pytest.mark.asyncio
async def test_mock_mode_outside_production_is_quiet(client, caplog):
    import logging

    with caplog.at_level(logging.WARNING, logger="truthlens.routes.health"):
        await client.get("/health")
    assert not [r for r in caplog.records if r.name == "truthlens.routes.health"]
