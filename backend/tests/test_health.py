"""
Tourlist Backend - Health Check Tests
======================================
"""

from unittest.mock import AsyncMock, PropertyMock, patch

import pytest

from app import __version__
from conftest import FakeMediaService


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["media"] == "available"
        assert body["version"] == __version__

    @pytest.mark.asyncio
    async def test_media_down_is_degraded(self, client, media):
        media.healthy = False

        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["media"] == "unavailable"

    @pytest.mark.asyncio
    async def test_open_circuit_skips_ping(self, client, media):
        with patch.object(FakeMediaService, "circuit_open", new_callable=PropertyMock, return_value=True):
            media.health_check = AsyncMock(return_value=True)
            response = await client.get("/health")

        assert response.json()["media"] == "circuit_open"
        media.health_check.assert_not_called()

    @pytest.mark.asyncio
    async def test_database_down_is_unhealthy(self, app, client):
        with patch.object(app.state.database, "ping", AsyncMock(return_value=False)):
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"

    @pytest.mark.asyncio
    async def test_no_session_needed(self, client):
        response = await client.get("/health", headers={"Accept": "text/html"})
        assert response.status_code == 200
