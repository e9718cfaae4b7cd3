"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test, no .env file)
  - Provide reusable fakes (recording email sender, token service, users)
  - Register markers

Collaborators:
  - pytest: Test framework
  - timetracker.infrastructure.repositories.in_memory: repos de tests

Notes:
  - APP_ENV se fija ANTES de importar timetracker: get_settings() y el
    logger se resuelven al importar.
"""

import os
import sys
from pathlib import Path
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("EMAIL_BACKEND", "console")

from timetracker.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None
app_config.get_settings.cache_clear()

from timetracker.identity.auth_users import JWTTokenService  # noqa: E402
from timetracker.identity.users import User  # noqa: E402
from timetracker.infrastructure.repositories.in_memory import (  # noqa: E402
    InMemoryOwnedResourceRepository,
    InMemoryTimeEntryRepository,
    InMemoryUserRepository,
)
from timetracker.infrastructure.services.email import (  # noqa: E402
    ConsoleEmailSender,
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Fakes
# ============================================================================


class PlainHasher:
    """Hasher reversible y rápido (Argon2 real solo en tests de identity)."""

    def hash(self, password: str) -> str:
        return f"plain${password}"

    def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"plain${password}"


class FailingEmailSender:
    def __init__(self) -> None:
        self.attempts = 0

    def send(self, to: str, subject: str, html: str) -> None:
        from timetracker.crosscutting.exceptions import EmailDeliveryError

        self.attempts += 1
        raise EmailDeliveryError("SMTP down")


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def projects() -> InMemoryOwnedResourceRepository:
    return InMemoryOwnedResourceRepository()


@pytest.fixture
def clients() -> InMemoryOwnedResourceRepository:
    return InMemoryOwnedResourceRepository()


@pytest.fixture
def tasks() -> InMemoryOwnedResourceRepository:
    return InMemoryOwnedResourceRepository()


@pytest.fixture
def tags() -> InMemoryOwnedResourceRepository:
    return InMemoryOwnedResourceRepository()


@pytest.fixture
def presets() -> InMemoryOwnedResourceRepository:
    return InMemoryOwnedResourceRepository()


@pytest.fixture
def entries() -> InMemoryTimeEntryRepository:
    return InMemoryTimeEntryRepository()


@pytest.fixture
def hasher() -> PlainHasher:
    return PlainHasher()


@pytest.fixture
def tokens() -> JWTTokenService:
    return JWTTokenService("test-secret-for-unit-tests")


@pytest.fixture
def outbox() -> ConsoleEmailSender:
    return ConsoleEmailSender()


@pytest.fixture
def failing_sender() -> FailingEmailSender:
    return FailingEmailSender()


@pytest.fixture
def make_user(users, hasher):
    """R: Factory de usuarios persistidos en el repo in-memory."""

    def _make(
        *,
        email: str = "ada@example.com",
        password: str = "secret1",
        name: str = "Ada",
        **fields,
    ) -> User:
        return users.create(
            User(
                id=uuid4(),
                name=name,
                email=email,
                password_hash=hasher.hash(password),
                **fields,
            )
        )

    return _make
