"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/time_entries.py
============================================================
Class: InMemoryTimeEntryRepository

Responsibilities:
  - Extender el repo genérico con las consultas temporales:
      - list_by_date_range (bordes inclusivos, start_time DESC)
      - find_running_by_user (la más recientemente iniciada)
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from ....domain.entities import TimeEntry
from .owned_resources import InMemoryOwnedResourceRepository


class InMemoryTimeEntryRepository(InMemoryOwnedResourceRepository[TimeEntry]):
    def list_by_date_range(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
        *,
        offset: int = 0,
        limit: int = 10,
    ) -> List[TimeEntry]:
        matched = self._select(
            lambda e: e.user_id == user_id and start <= e.start_time <= end
        )
        matched.sort(key=lambda e: (e.start_time, str(e.id)), reverse=True)
        return matched[offset : offset + limit]

    def find_running_by_user(self, user_id: UUID) -> Optional[TimeEntry]:
        running = self._select(lambda e: e.user_id == user_id and e.is_running)
        return max(running, key=lambda e: e.start_time, default=None)
