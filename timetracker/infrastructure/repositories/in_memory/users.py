"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/users.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar cuentas en memoria (tests / local dev).
  - Búsqueda por email case-insensitive y por google_id.
  - Unicidad de email (lower) y google_id bajo el lock -> DuplicateUserError.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Any, Dict, Mapping, Optional
from uuid import UUID

from ....crosscutting.exceptions import DuplicateUserError
from ....domain.entities import utcnow
from ....identity.users import User


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}

    def create(self, user: User) -> User:
        now = utcnow()
        stored = replace(user, created_at=now, updated_at=now)
        with self._lock:
            self._ensure_unique(stored)
            self._users[stored.id] = stored
        return stored

    def _ensure_unique(self, candidate: User) -> None:
        # R: mismo contrato que uq_users_lower_email / uq_users_google_id.
        email = candidate.email.lower()
        for other in self._users.values():
            if other.id == candidate.id:
                continue
            if other.email.lower() == email:
                raise DuplicateUserError(f"Email already registered: {email}")
            if candidate.google_id and other.google_id == candidate.google_id:
                raise DuplicateUserError("Google account already linked")

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        wanted = email.strip().lower()
        with self._lock:
            return next(
                (u for u in self._users.values() if u.email.lower() == wanted), None
            )

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        with self._lock:
            return next(
                (u for u in self._users.values() if u.google_id == google_id), None
            )

    def update(self, user_id: UUID, changes: Mapping[str, Any]) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            updated = replace(current, **dict(changes), updated_at=utcnow())
            self._ensure_unique(updated)
            self._users[user_id] = updated
            return updated
