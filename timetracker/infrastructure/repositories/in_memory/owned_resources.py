"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/owned_resources.py
============================================================
Class: InMemoryOwnedResourceRepository[E]

Responsibilities:
  - Almacenar recursos con dueño en memoria (tests / local dev).
  - Implementar el contrato OwnedResourceRepository:
      create / get / update (find-and-update atómico) / delete / list / count
  - Mantener ordering determinístico alineado con Postgres:
      ORDER BY created_at DESC, id DESC

Collaborators:
  - domain.entities (dataclasses frozen)
  - domain.repositories.OwnedResourceRepository (contrato)

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Repo puro: NO aplica ownership (eso lo hace la policy arriba).
  - Entidades inmutables: update reemplaza la instancia (dataclasses.replace),
    así ningún caller comparte un objeto "vivo".
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Optional, TypeVar
from uuid import UUID

from ....domain.entities import utcnow

E = TypeVar("E")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryOwnedResourceRepository(Generic[E]):
    """
    Repositorio in-memory genérico.

    Modelo mental:
    - _items es la "tabla" en memoria (UUID -> entidad).
    - Cada operación lee/escribe bajo lock.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._items: Dict[UUID, E] = {}

    # =========================================================
    # Helpers internos
    # =========================================================
    @staticmethod
    def _matches(entity: E, filters: Mapping[str, Any]) -> bool:
        return all(getattr(entity, key, None) == value for key, value in filters.items())

    @staticmethod
    def _newest_first(items: Iterable[E]) -> List[E]:
        return sorted(
            items,
            key=lambda e: (e.created_at or _EPOCH, str(e.id)),
            reverse=True,
        )

    def _select(self, predicate: Callable[[E], bool]) -> List[E]:
        with self._lock:
            return [e for e in self._items.values() if predicate(e)]

    # =========================================================
    # Comandos
    # =========================================================
    def create(self, entity: E) -> E:
        now = utcnow()
        stored = replace(entity, created_at=now, updated_at=now)
        with self._lock:
            self._items[stored.id] = stored
        return stored

    def update(self, entity_id: UUID, changes: Mapping[str, Any]) -> Optional[E]:
        with self._lock:
            current = self._items.get(entity_id)
            if current is None:
                return None
            updated = replace(current, **dict(changes), updated_at=utcnow())
            self._items[entity_id] = updated
            return updated

    def delete(self, entity_id: UUID) -> bool:
        with self._lock:
            return self._items.pop(entity_id, None) is not None

    # =========================================================
    # Consultas
    # =========================================================
    def get(self, entity_id: UUID) -> Optional[E]:
        with self._lock:
            return self._items.get(entity_id)

    def list(
        self,
        *,
        filters: Mapping[str, Any],
        offset: int = 0,
        limit: int = 10,
    ) -> List[E]:
        matched = self._newest_first(self._select(lambda e: self._matches(e, filters)))
        return matched[offset : offset + limit]

    def count(self, *, filters: Mapping[str, Any]) -> int:
        return len(self._select(lambda e: self._matches(e, filters)))
