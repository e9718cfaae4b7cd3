"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/owned_resources.py
============================================================
Class: PostgresOwnedResourceRepository[E]

Responsibilities:
- Implementar OwnedResourceRepository en PostgreSQL (SQL crudo) para
  cualquier tabla "owned" (clients, projects, tasks, tags, timer_presets,
  time_entries).
- Mapear filas <-> dataclasses de dominio con una lista explícita de
  columnas (contrato con migraciones).
- update(id, changes) en un único UPDATE ... RETURNING (find-and-update
  atómico).
- Exponer fallos consistentes vía DatabaseError con logging estructurado.

Collaborators:
- psycopg.sql (identificadores seguros para tabla/columnas)
- psycopg_pool.ConnectionPool
- crosscutting.exceptions.DatabaseError
- crosscutting.logger.logger

Constraints / Notes:
- Sin lógica de negocio: ownership lo aplica la policy arriba.
- Queries siempre parametrizadas; tabla/columnas salen de la configuración
  del repo (nunca del input del usuario). Un filtro/cambio sobre una columna
  desconocida es un error de programación (ValueError).
- Orden estable en listados: created_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

from dataclasses import fields as dataclass_fields
from dataclasses import replace
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
)
from uuid import UUID

from psycopg import sql
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import utcnow

E = TypeVar("E")

Decoder = Callable[[Any], Any]

_ORDER_BY = sql.SQL("ORDER BY created_at DESC, id DESC")


def to_db(value: Any) -> Any:
    """R: Valor de dominio -> parámetro psycopg (enums por valor, tuplas como arrays)."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return list(value)
    return value


class PostgresOwnedResourceRepository(Generic[E]):
    """R: Implementación PostgreSQL genérica de un store de recursos con dueño."""

    def __init__(
        self,
        *,
        table: str,
        entity_cls: Type[E],
        decoders: Optional[Mapping[str, Decoder]] = None,
        pool: Optional[ConnectionPool] = None,
    ) -> None:
        self._table = table
        self._entity_cls = entity_cls
        # R: columnas == campos del dataclass (mismo orden que el SELECT).
        self._columns: Sequence[str] = tuple(f.name for f in dataclass_fields(entity_cls))
        self._decoders: Dict[str, Decoder] = dict(decoders or {})
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        # R: Pool inyectable para tests; en producción se obtiene del singleton.
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    # =========================================================
    # SQL helpers
    # =========================================================
    @property
    def _table_sql(self) -> sql.Identifier:
        return sql.Identifier(self._table)

    def _column_list(self, columns: Iterable[str] | None = None) -> sql.Composed:
        return sql.SQL(", ").join(
            sql.Identifier(c) for c in (self._columns if columns is None else columns)
        )

    def _check_columns(self, names: Iterable[str]) -> None:
        unknown = set(names) - set(self._columns)
        if unknown:
            raise ValueError(f"Unknown columns for {self._table}: {sorted(unknown)}")

    def _where(self, filters: Mapping[str, Any]) -> tuple[sql.Composable, list[Any]]:
        self._check_columns(filters)
        if not filters:
            return sql.SQL(""), []
        conditions = sql.SQL(" AND ").join(
            sql.SQL("{} = %s").format(sql.Identifier(name)) for name in filters
        )
        return sql.SQL("WHERE {}").format(conditions), [to_db(v) for v in filters.values()]

    # =========================================================
    # Mapping
    # =========================================================
    def _row_to_entity(self, row: Sequence[Any]) -> E:
        values = dict(zip(self._columns, row))
        for name, decode in self._decoders.items():
            if values.get(name) is not None:
                values[name] = decode(values[name])
        return self._entity_cls(**values)

    # =========================================================
    # Ejecución (DRY + errores consistentes)
    # =========================================================
    def _fetchall(
        self,
        *,
        query: sql.Composable,
        params: Iterable[object],
        context_msg: str,
        extra: dict,
    ) -> list[tuple]:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except Exception as exc:
            logger.exception(
                context_msg, extra={**extra, "table": self._table, "error": str(exc)}
            )
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    def _fetchone(
        self,
        *,
        query: sql.Composable,
        params: Iterable[object],
        context_msg: str,
        extra: dict,
    ) -> tuple | None:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except Exception as exc:
            logger.exception(
                context_msg, extra={**extra, "table": self._table, "error": str(exc)}
            )
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    # =========================================================
    # Public API
    # =========================================================
    def create(self, entity: E) -> E:
        now = utcnow()
        stamped = replace(entity, created_at=now, updated_at=now)
        values = [to_db(getattr(stamped, c)) for c in self._columns]

        query = sql.SQL(
            "INSERT INTO {table} ({cols}) VALUES ({placeholders}) RETURNING {cols}"
        ).format(
            table=self._table_sql,
            cols=self._column_list(),
            placeholders=sql.SQL(", ").join(sql.Placeholder() * len(values)),
        )
        row = self._fetchone(
            query=query,
            params=values,
            context_msg=f"PostgresOwnedResourceRepository: create {self._table} failed",
            extra={"resource_id": str(entity.id)},
        )
        return self._row_to_entity(row) if row else None

    def get(self, entity_id: UUID) -> Optional[E]:
        query = sql.SQL("SELECT {cols} FROM {table} WHERE id = %s").format(
            cols=self._column_list(), table=self._table_sql
        )
        row = self._fetchone(
            query=query,
            params=(entity_id,),
            context_msg=f"PostgresOwnedResourceRepository: get {self._table} failed",
            extra={"resource_id": str(entity_id)},
        )
        return self._row_to_entity(row) if row else None

    def update(self, entity_id: UUID, changes: Mapping[str, Any]) -> Optional[E]:
        self._check_columns(changes)
        assignments = [
            sql.SQL("{} = %s").format(sql.Identifier(name)) for name in changes
        ]
        assignments.append(sql.SQL("updated_at = %s"))

        query = sql.SQL(
            "UPDATE {table} SET {assignments} WHERE id = %s RETURNING {cols}"
        ).format(
            table=self._table_sql,
            assignments=sql.SQL(", ").join(assignments),
            cols=self._column_list(),
        )
        params = [to_db(v) for v in changes.values()] + [utcnow(), entity_id]
        row = self._fetchone(
            query=query,
            params=params,
            context_msg=f"PostgresOwnedResourceRepository: update {self._table} failed",
            extra={"resource_id": str(entity_id), "fields": sorted(changes)},
        )
        return self._row_to_entity(row) if row else None

    def delete(self, entity_id: UUID) -> bool:
        query = sql.SQL("DELETE FROM {table} WHERE id = %s RETURNING id").format(
            table=self._table_sql
        )
        row = self._fetchone(
            query=query,
            params=(entity_id,),
            context_msg=f"PostgresOwnedResourceRepository: delete {self._table} failed",
            extra={"resource_id": str(entity_id)},
        )
        return row is not None

    def list(
        self,
        *,
        filters: Mapping[str, Any],
        offset: int = 0,
        limit: int = 10,
    ) -> List[E]:
        where_sql, params = self._where(filters)
        query = sql.SQL(
            "SELECT {cols} FROM {table} {where} {order} LIMIT %s OFFSET %s"
        ).format(
            cols=self._column_list(),
            table=self._table_sql,
            where=where_sql,
            order=_ORDER_BY,
        )
        rows = self._fetchall(
            query=query,
            params=[*params, limit, offset],
            context_msg=f"PostgresOwnedResourceRepository: list {self._table} failed",
            extra={"filters": sorted(filters), "offset": offset, "limit": limit},
        )
        return [self._row_to_entity(r) for r in rows]

    def count(self, *, filters: Mapping[str, Any]) -> int:
        where_sql, params = self._where(filters)
        query = sql.SQL("SELECT COUNT(*) FROM {table} {where}").format(
            table=self._table_sql, where=where_sql
        )
        row = self._fetchone(
            query=query,
            params=params,
            context_msg=f"PostgresOwnedResourceRepository: count {self._table} failed",
            extra={"filters": sorted(filters)},
        )
        return int(row[0]) if row else 0
