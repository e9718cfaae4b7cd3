"""
===============================================================================
TARJETA CRC — domain/repositories.py
===============================================================================

Módulo:
    Puertos de persistencia (Protocols)

Responsabilidades:
    - Definir el contrato genérico de un store de recursos "owned".
    - Definir extensiones: consultas de TimeEntry y store de usuarios.
    - Mantener a la capa de aplicación desacoplada de Postgres/in-memory.

Colaboradores:
    - infrastructure.repositories.in_memory.*
    - infrastructure.repositories.postgres.*
    - application/usecases/*

Contrato común:
    - get / update / delete NO filtran por dueño: eso lo hace la policy
      (ownership_policy.authorize) en la capa de aplicación.
    - list / count reciben filtros de igualdad (ej: {"user_id": ...}).
    - update(id, changes) es un find-and-update atómico: devuelve el registro
      nuevo, o None si el id no existe.
    - Orden de listados: más nuevo primero (created_at DESC, id DESC).
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Mapping, Optional, Protocol, TypeVar
from uuid import UUID

from ..identity.users import User
from .entities import TimeEntry

E = TypeVar("E")


class OwnedResourceRepository(Protocol[E]):
    """R: Interface genérica para recursos con dueño."""

    def create(self, entity: E) -> E:
        """R: Persiste y devuelve la entidad con timestamps asignados."""
        ...

    def get(self, entity_id: UUID) -> Optional[E]:
        ...

    def update(self, entity_id: UUID, changes: Mapping[str, Any]) -> Optional[E]:
        """R: Merge de `changes` + refresh de updated_at. None si no existe."""
        ...

    def delete(self, entity_id: UUID) -> bool:
        """R: Hard delete. True si se borró un registro."""
        ...

    def list(
        self,
        *,
        filters: Mapping[str, Any],
        offset: int = 0,
        limit: int = 10,
    ) -> List[E]:
        ...

    def count(self, *, filters: Mapping[str, Any]) -> int:
        ...


class TimeEntryRepository(OwnedResourceRepository[TimeEntry], Protocol):
    """R: Store de TimeEntry con consultas temporales."""

    def list_by_date_range(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
        *,
        offset: int = 0,
        limit: int = 10,
    ) -> List[TimeEntry]:
        """
        R: Entradas con start <= start_time <= end (bordes inclusivos),
        ordenadas por start_time DESC.
        """
        ...

    def find_running_by_user(self, user_id: UUID) -> Optional[TimeEntry]:
        """R: Entrada is_running más recientemente iniciada, o None."""
        ...


class UserRepository(Protocol):
    """R: Store de cuentas de usuario."""

    def create(self, user: User) -> User:
        """R: Email (lower) y google_id únicos; colisión -> DuplicateUserError."""
        ...

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        """R: Búsqueda case-insensitive."""
        ...

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        ...

    def update(self, user_id: UUID, changes: Mapping[str, Any]) -> Optional[User]:
        ...
