"""
Name: HTTP Test Fixtures

Responsibilities:
  - Minimal FastAPI app (auth + API routers + exception handlers)
  - Fresh in-memory container and rate limiters per test
  - Helpers to register users and get auth headers
"""

from functools import _lru_cache_wrapper

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from timetracker import container
from timetracker.api.auth_routes import router as auth_router
from timetracker.api.exception_handlers import register_exception_handlers
from timetracker.crosscutting.rate_limit import reset_rate_limiters
from timetracker.interfaces.api.http.router import router as api_router


def _clear_container() -> None:
    for value in vars(container).values():
        if isinstance(value, _lru_cache_wrapper):
            value.cache_clear()
    reset_rate_limiters()


@pytest.fixture
def app() -> FastAPI:
    _clear_container()
    application = FastAPI()
    register_exception_handlers(application)
    application.include_router(auth_router)
    application.include_router(api_router)
    yield application
    _clear_container()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def register(client):
    """R: Registra un usuario y devuelve (body, headers Bearer)."""

    def _register(email: str = "ada@example.com", password: str = "secret1"):
        response = client.post(
            "/auth/register",
            json={"name": "Ada", "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        # R: sin cookie: cada request usa solo el header del usuario indicado.
        client.cookies.clear()
        return body, {"Authorization": f"Bearer {body['token']}"}

    return _register
