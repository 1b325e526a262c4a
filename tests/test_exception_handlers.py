"""Tests for global exception handlers.

Validates that login outcomes map to stable status codes and that
unexpected errors never leak internals.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from authgate.core.errors import (
    AppError,
    HashingAppError,
    InvalidCredentialsAppError,
    RateLimitedAppError,
)
from authgate.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/invalid-credentials")
    async def invalid_credentials():
        raise InvalidCredentialsAppError()

    @app.get("/rate-limited")
    async def rate_limited():
        raise RateLimitedAppError(retry_after_seconds=42)

    @app.get("/hashing")
    async def hashing():
        raise HashingAppError(code="password_hashing_failed", message="Password hashing could not be completed")

    @app.get("/generic")
    async def generic():
        raise AppError(code="bad_request", message="Bad request", details={"hint": "check input"})

    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestAppErrorHandler:
    def test_invalid_credentials_returns_401(self, client: TestClient) -> None:
        response = client.get("/invalid-credentials")

        assert response.status_code == 401
        error = response.json()["error"]
        assert error["code"] == "invalid_credentials"
        assert error["message"] == "Invalid email or password"
        assert "request_id" in error
        assert "details" not in error

    def test_rate_limited_returns_429_with_retry_after(self, client: TestClient) -> None:
        response = client.get("/rate-limited")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "42"
        assert response.json()["error"]["details"] == {"retry_after": 42}

    def test_hashing_failure_returns_500(self, client: TestClient) -> None:
        response = client.get("/hashing")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "password_hashing_failed"
        assert "Retry-After" not in response.headers

    def test_other_app_errors_return_400_with_details(self, client: TestClient) -> None:
        response = client.get("/generic")

        assert response.status_code == 400
        assert response.json()["error"]["details"] == {"hint": "check input"}


class TestGeneralExceptionHandler:
    def test_handler_registered(self, app_with_handlers: FastAPI) -> None:
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers

    def test_unexpected_error_is_generic(self) -> None:
        request = AsyncMock()
        request.url.path = "/v1/auth/login"
        request.method = "POST"

        exc = RuntimeError("connection to credential database refused")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "credential database" not in data["error"]["message"]
        assert "RuntimeError" not in bytes(response.body).decode()


def test_multiple_handler_setups_does_not_fail() -> None:
    app = FastAPI()

    setup_exception_handlers(app)
    setup_exception_handlers(app)

    assert AppError in app.exception_handlers
