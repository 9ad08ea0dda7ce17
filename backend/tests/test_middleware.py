"""
Game Reviews API — Middleware & Error Handler Tests
=====================================================

What:  Rate limiting, request ids and the global exception handlers.
How:   A fresh app from create_app() per test so rate-limit counters do
       not leak between tests; routes that would need the database are
       either avoided or have the service patched.
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from gamereviews.config import settings
from gamereviews.exceptions import DatabaseError, GameReviewsError
from gamereviews.main import create_app
from gamereviews.services.review_service import review_service


def _client(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_requests_over_the_limit_get_429(self, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 2)
        monkeypatch.setattr(settings, "rate_limit_window", 60)

        async with _client(create_app()) as client:
            first = await client.get("/api/nowhere")
            second = await client.get("/api/nowhere")
            third = await client.get("/api/nowhere")

        assert first.status_code == 404
        assert second.status_code == 404
        assert third.status_code == 429
        assert third.json()["message"].startswith("Too Many Requests")
        assert int(third.headers["Retry-After"]) >= 1

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 1)

        with patch("gamereviews.routes.health.ping_database", new=AsyncMock()):
            async with _client(create_app()) as client:
                responses = [await client.get("/health") for _ in range(3)]

        assert [r.status_code for r in responses] == [200, 200, 200]


class TestErrorHandlers:

    @pytest.mark.asyncio
    async def test_database_error_is_generic_500(self):
        failing = AsyncMock(side_effect=DatabaseError(context={"operation": "fetch_categories"}))

        with patch.object(review_service, "list_categories", new=failing):
            async with _client(create_app()) as client:
                response = await client.get("/api/categories")

        assert response.status_code == 500
        assert response.json() == {"message": "Internal Server Error"}

    @pytest.mark.asyncio
    async def test_base_app_error_is_generic_500(self):
        failing = AsyncMock(side_effect=GameReviewsError("secret detail"))

        with patch.object(review_service, "list_reviews", new=failing):
            async with _client(create_app()) as client:
                response = await client.get("/api/reviews")

        assert response.status_code == 500
        assert "secret detail" not in response.text

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id(self):
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        # Starlette re-raises after rendering the 500; keep the response instead
        transport = ASGITransport(app=create_app(), raise_app_exceptions=False)

        with patch.object(review_service.store, "fetch_categories", new=failing):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get(
                    "/api/categories", headers={"X-Request-ID": "t-1"}
                )

        assert response.status_code == 500
        assert response.json() == {"message": "Internal Server Error"}
        assert response.headers["X-Request-ID"] == "t-1"

    @pytest.mark.asyncio
    async def test_unexpected_error_without_client_id_still_gets_one(self):
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        transport = ASGITransport(app=create_app(), raise_app_exceptions=False)

        with patch.object(review_service, "list_reviews", new=failing):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/api/reviews")

        assert response.status_code == 500
        assert response.headers.get("X-Request-ID")


class TestHealthDegraded:

    @pytest.mark.asyncio
    async def test_unreachable_database_reports_unhealthy(self):
        down = AsyncMock(side_effect=OSError("connection refused"))

        with patch("gamereviews.routes.health.ping_database", new=down):
            async with _client(create_app()) as client:
                response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["database"] == "disconnected"
