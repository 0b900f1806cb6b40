"""Integration tests for settings-dependent request handling."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from unittest.mock import patch

import pytest
from fastapi import status
from httpx import ASGITransport, AsyncClient

from app.core.app import create_app
from app.core.config import AppBaseSettings


async def _client_for(
    settings: AppBaseSettings, clock, *, raise_app_exceptions: bool = True
) -> AsyncGenerator[AsyncClient, None]:
    application = create_app(settings, clock=clock)
    transport = ASGITransport(app=application, raise_app_exceptions=raise_app_exceptions)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
async def permissive_client(test_settings, clock) -> AsyncGenerator[AsyncClient, None]:
    settings = test_settings.model_copy(update={"TIMEZONE_FORMAT_CHECK": False})
    async for client in _client_for(settings, clock):
        yield client


@pytest.fixture
async def peer_client(test_settings, clock) -> AsyncGenerator[AsyncClient, None]:
    settings = test_settings.model_copy(
        update={"RATE_LIMIT_FALLBACK_TO_PEER": True, "RATE_LIMIT_MAX_REQUESTS": 1}
    )
    async for client in _client_for(settings, clock):
        yield client


class TestFormatCheckDisabled:
    @pytest.mark.asyncio
    async def test_malformed_value_reported_as_unknown(self, permissive_client):
        response = await permissive_client.get("/api", params={"timezone": "Pacific Auckland"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            "error": "Invalid timezone 'Pacific Auckland'. Please provide a valid IANA timezone identifier."
        }


class TestPeerFallback:
    @pytest.mark.asyncio
    async def test_peer_address_identifies_client_without_header(self, peer_client):
        first = await peer_client.get("/api", params={"timezone": "UTC"})
        second = await peer_client.get("/api", params={"timezone": "Asia/Tokyo"})

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    @pytest.mark.asyncio
    async def test_header_still_takes_precedence(self, peer_client):
        await peer_client.get("/api", params={"timezone": "UTC"})

        response = await peer_client.get(
            "/api", params={"timezone": "Asia/Tokyo"}, headers={"CF-Connecting-IP": "192.0.2.10"}
        )

        assert response.status_code == status.HTTP_200_OK


class TestCustomTtl:
    @pytest.mark.asyncio
    async def test_cache_control_follows_ttl(self, test_settings, clock):
        settings = test_settings.model_copy(update={"CACHE_TTL_MS": 5000})
        async for client in _client_for(settings, clock):
            response = await client.get("/api", params={"timezone": "UTC"})

            assert response.headers["cache-control"] == "public, max-age=5"


@pytest.fixture
async def tolerant_client(test_settings, clock) -> AsyncGenerator[AsyncClient, None]:
    settings = test_settings.model_copy(update={"DEBUG": False, "CORS_ALLOW_ORIGIN": "https://clock.example"})
    async for client in _client_for(settings, clock, raise_app_exceptions=False):
        yield client


class TestUnhandledErrors:
    @pytest.mark.asyncio
    async def test_failure_while_responding_renders_json_with_cors(self, tolerant_client):
        with patch(
            "app.domains.timezones.routes.cache_control_header",
            side_effect=RuntimeError("header rendering failed"),
        ):
            response = await tolerant_client.get("/api", params={"timezone": "UTC"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"error": "Internal Server Error. Please try again later."}
        assert "header rendering failed" not in response.text
        assert response.headers["access-control-allow-origin"] == "https://clock.example"
        assert response.headers["access-control-allow-methods"] == "GET, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type"
