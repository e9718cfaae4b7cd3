"""
============================================================
TARJETA CRC — infrastructure/repositories/__init__.py
============================================================
Module: infrastructure.repositories (Public Export Surface)

Responsibilities:
  - Exponer los repositorios concretos (Postgres primero, luego InMemory).

Policy:
  - Solo re-exporta símbolos; no debe tener side effects.
============================================================
"""

from .in_memory import (
    InMemoryOwnedResourceRepository,
    InMemoryTimeEntryRepository,
    InMemoryUserRepository,
)
from .postgres import (
    PostgresOwnedResourceRepository,
    PostgresTimeEntryRepository,
    PostgresUserRepository,
)

__all__ = [
    "PostgresOwnedResourceRepository",
    "PostgresTimeEntryRepository",
    "PostgresUserRepository",
    "InMemoryOwnedResourceRepository",
    "InMemoryTimeEntryRepository",
    "InMemoryUserRepository",
]
