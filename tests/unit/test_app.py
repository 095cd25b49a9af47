"""
Unit tests for application-level behavior.

Tests the pieces wired in create_app():
- Health check
- 404 handler for unmatched routes
- Global error handler (development vs production)
- CORS
- Request logging
- Store selection at startup
"""

import logging

import pytest
from fastapi.testclient import TestClient

from greetme.adapters.repository.memory import InMemoryAccountRepository
from greetme.api.dependencies import get_account_service
from greetme.config.settings import Settings, get_settings


def failing_service():
    raise RuntimeError("database exploded")


class TestHealth:
    """Tests for GET /health."""

    def test_health_returns_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["message"] == "GreetMe API is running"
        assert "timestamp" in body


class TestNotFoundHandler:
    """Unmatched routes."""

    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Route not found", "path": "/api/nope", "method": "GET"}

    def test_unknown_route_post(self, client: TestClient) -> None:
        response = client.post("/somewhere", json={})

        assert response.status_code == 404
        assert response.json()["method"] == "POST"

    def test_wrong_method_is_not_route_not_found(self, client: TestClient) -> None:
        response = client.get("/api/register")

        assert response.status_code == 405
        assert "error" in response.json()


class TestGlobalErrorHandler:
    """Unhandled exceptions."""

    def test_development_returns_detail(self, app_factory) -> None:
        app = app_factory(environment="development")
        app.dependency_overrides[get_account_service] = failing_service

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post("/api/login", json={"email": "a@x.com", "password": "x"})

        assert response.status_code == 500
        assert response.json()["error"] == "database exploded"
        assert "stack" in response.json()

    def test_production_masks_detail(self, app_factory) -> None:
        app = app_factory(environment="production")
        app.dependency_overrides[get_account_service] = failing_service

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post("/api/login", json={"email": "a@x.com", "password": "x"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}
        assert "database exploded" not in response.text


class TestCors:
    """Cross-origin configuration."""

    def test_allowed_origin_preflight(self, app_factory) -> None:
        app = app_factory(allowed_origin="https://app.greetme.example")

        with TestClient(app) as client:
            response = client.options(
                "/api/register",
                headers={
                    "Origin": "https://app.greetme.example",
                    "Access-Control-Request-Method": "POST",
                },
            )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "https://app.greetme.example"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_unknown_origin_not_allowed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"Origin": "https://evil.example"})
        assert "access-control-allow-origin" not in response.headers


class TestRequestLogging:
    """Request logging middleware."""

    def test_requests_are_logged(self, client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="greetme.api.main"):
            client.get("/health")

        assert "GET /health" in caplog.text


class TestStartup:
    """Store selection in the lifespan."""

    def test_in_memory_store_by_default(self, app_factory) -> None:
        app = app_factory()
        with TestClient(app):
            assert isinstance(app.state.repository, InMemoryAccountRepository)
            assert app.state.credentials.rounds == 4

    def test_each_app_has_its_own_store(self, app_factory) -> None:
        first, second = app_factory(), app_factory()
        with TestClient(first), TestClient(second):
            assert first.state.repository is not second.state.repository


class TestSettings:
    """Environment-driven configuration."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.port == 4000
        assert settings.use_postgres is False
        assert settings.bcrypt_cost == 12
        assert settings.is_production is False

    def test_environment_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("USE_POSTGRES", "true")
        monkeypatch.setenv("FRONTEND_URL", "https://greetme.example")
        monkeypatch.setenv("ENVIRONMENT", "Production")

        settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.use_postgres is True
        assert settings.frontend_url == "https://greetme.example"
        assert settings.is_production is True

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
