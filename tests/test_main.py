"""Tests for service endpoints, the error envelope and /api/auth/me"""

import uuid

import pytest
from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient

from ottoway.config import get_settings
from ottoway.core.exceptions import setup_exception_handlers


@pytest.fixture
def failing_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database exploded")

    return app


async def _get_boom(app: FastAPI):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get("/boom")


@pytest.mark.asyncio
class TestServiceEndpoints:

    async def test_root(self, async_client: AsyncClient):
        response = await async_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["ok"] is True
        assert data["service"] == "ottoway-backend"
        assert data["timestamp"]

    async def test_health_is_plain_text(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.text == "OK"
        assert response.headers["content-type"].startswith("text/plain")

    async def test_request_id_is_echoed(self, async_client: AsyncClient):
        request_id = uuid.uuid4().hex

        response = await async_client.get("/health", headers={"X-Request-ID": request_id})

        assert response.headers["X-Request-ID"] == request_id

    async def test_request_id_is_generated(self, async_client: AsyncClient):
        response = await async_client.get("/health")
        assert response.headers.get("X-Request-ID")

    async def test_unknown_route(self, async_client: AsyncClient):
        response = await async_client.get("/api/nothing-here")
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
class TestUnexpectedErrors:

    async def test_details_in_development(self, failing_app, monkeypatch):
        monkeypatch.setattr(get_settings(), "ENVIRONMENT", "development")

        response = await _get_boom(failing_app)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        error = response.json()["error"]
        assert error["code"] == "InternalServerError"
        assert error["path"] == "/boom"
        assert "database exploded" in error["details"]["exception"]

    async def test_details_hidden_in_production(self, failing_app, monkeypatch):
        monkeypatch.setattr(get_settings(), "ENVIRONMENT", "production")

        response = await _get_boom(failing_app)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        error = response.json()["error"]
        assert error["details"] == {}
        assert "database exploded" not in response.text


@pytest.mark.asyncio
class TestMe:

    async def test_me_returns_shadow_record(self, async_client: AsyncClient, u1_headers: dict):
        response = await async_client.get("/api/auth/me", headers=u1_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["clerk_id"] == "user_1"
        assert data["email"] == "Jane@Example.com"
        assert data["name"] == "Jane Doe"

    async def test_me_is_stable_across_requests(self, async_client: AsyncClient, u1_headers: dict):
        first = (await async_client.get("/api/auth/me", headers=u1_headers)).json()
        second = (await async_client.get("/api/auth/me", headers=u1_headers)).json()

        assert first["id"] == second["id"]

    async def test_me_when_identity_provider_is_down(self, async_client: AsyncClient, identity, u2_headers: dict):
        identity.unreachable = True

        response = await async_client.get("/api/auth/me", headers=u2_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["name"] == "User"
        assert data["email"] == "user_2@temp.com"

    async def test_me_requires_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["WWW-Authenticate"] == "Bearer"
