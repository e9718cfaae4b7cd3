"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/time_entries.py
============================================================
Class: PostgresTimeEntryRepository

Responsibilities:
- Store de time_entries sobre el repo genérico + consultas temporales:
    - list_by_date_range: start <= start_time <= end, start_time DESC
    - find_running_by_user: la entrada is_running más recientemente iniciada

Notes:
- tag_ids se persiste como uuid[] y vuelve como tupla.
- El índice único parcial (user_id) WHERE is_running respalda la regla de
  un solo timer corriendo entre procesos.
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from psycopg import sql
from psycopg_pool import ConnectionPool

from ....domain.entities import TimeEntry
from .owned_resources import PostgresOwnedResourceRepository


class PostgresTimeEntryRepository(PostgresOwnedResourceRepository[TimeEntry]):
    def __init__(self, pool: Optional[ConnectionPool] = None) -> None:
        super().__init__(
            table="time_entries",
            entity_cls=TimeEntry,
            decoders={"tag_ids": tuple},
            pool=pool,
        )

    def list_by_date_range(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
        *,
        offset: int = 0,
        limit: int = 10,
    ) -> List[TimeEntry]:
        query = sql.SQL(
            "SELECT {cols} FROM {table} "
            "WHERE user_id = %s AND start_time >= %s AND start_time <= %s "
            "ORDER BY start_time DESC, id DESC LIMIT %s OFFSET %s"
        ).format(cols=self._column_list(), table=self._table_sql)
        rows = self._fetchall(
            query=query,
            params=(user_id, start, end, limit, offset),
            context_msg="PostgresTimeEntryRepository: list_by_date_range failed",
            extra={"user_id": str(user_id), "offset": offset, "limit": limit},
        )
        return [self._row_to_entity(r) for r in rows]

    def find_running_by_user(self, user_id: UUID) -> Optional[TimeEntry]:
        query = sql.SQL(
            "SELECT {cols} FROM {table} "
            "WHERE user_id = %s AND is_running "
            "ORDER BY start_time DESC LIMIT 1"
        ).format(cols=self._column_list(), table=self._table_sql)
        row = self._fetchone(
            query=query,
            params=(user_id,),
            context_msg="PostgresTimeEntryRepository: find_running_by_user failed",
            extra={"user_id": str(user_id)},
        )
        return self._row_to_entity(row) if row else None
