"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/users.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Crear / leer / actualizar cuentas en la tabla `users`.
  - Búsqueda por email case-insensitive (lower(email), índice único).
  - Mapear filas crudas <-> `User` (enums de idioma/tema, verificación
    pendiente en dos columnas).
  - Exponer fallos consistentes vía `DatabaseError` con logging estructurado.
  - Violación de índice único (email / google_id) -> `DuplicateUserError`.

Collaborators:
  - psycopg_pool.ConnectionPool
  - identity.users.User / Language / Theme / PendingVerification
  - crosscutting.exceptions.DatabaseError

Constraints / Notes:
  - Repositorio puro: NO define reglas de negocio.
  - Retorna None cuando no existe el recurso.
  - Un idioma/tema persistido inválido -> DatabaseError (drift de datos).
============================================================
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional
from uuid import UUID

from psycopg import errors as pg_errors
from psycopg import sql
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, DuplicateUserError
from ....crosscutting.logger import logger
from ....domain.entities import utcnow
from ....identity.users import Language, PendingVerification, Theme, User
from .owned_resources import to_db

# R: Lista explícita de columnas (contrato con migraciones).
_USER_COLUMNS = (
    "id",
    "name",
    "email",
    "password_hash",
    "preferred_language",
    "theme",
    "default_timer_preset_id",
    "google_id",
    "picture",
    "email_verified",
    "verification_token",
    "verification_expires_at",
    "last_verification_request",
    "created_at",
    "updated_at",
)

# R: Campos de User que se guardan 1:1 en una columna.
_DIRECT_FIELDS = frozenset(_USER_COLUMNS) - {"verification_token", "verification_expires_at"}

_SELECT = sql.SQL("SELECT {cols} FROM users").format(
    cols=sql.SQL(", ").join(sql.Identifier(c) for c in _USER_COLUMNS)
)
_RETURNING = sql.SQL("RETURNING {cols}").format(
    cols=sql.SQL(", ").join(sql.Identifier(c) for c in _USER_COLUMNS)
)


def _row_to_user(row: tuple) -> User:
    values = dict(zip(_USER_COLUMNS, row))
    try:
        language = Language(values["preferred_language"])
        theme = Theme(values["theme"])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user preference in database: {exc}") from exc

    token = values.pop("verification_token")
    expires_at = values.pop("verification_expires_at")
    pending = (
        PendingVerification(token=token, expires_at=expires_at)
        if token and expires_at
        else None
    )
    return User(
        **{
            **values,
            "preferred_language": language,
            "theme": theme,
            "pending_verification": pending,
        }
    )


def _to_columns(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """R: Cambios de dominio -> columnas (pending_verification se separa en dos)."""
    columns: Dict[str, Any] = {}
    for key, value in changes.items():
        if key == "pending_verification":
            columns["verification_token"] = value.token if value else None
            columns["verification_expires_at"] = value.expires_at if value else None
        elif key in _DIRECT_FIELDS:
            columns[key] = to_db(value)
        else:
            raise ValueError(f"Unknown user field: {key}")
    return columns


class PostgresUserRepository:
    """R: Implementación PostgreSQL del store de usuarios."""

    def __init__(self, pool: Optional[ConnectionPool] = None) -> None:
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    def _fetchone(
        self,
        *,
        query: sql.Composable,
        params: Iterable[object],
        log_msg: str,
        log_extra: dict[str, object],
    ) -> tuple | None:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except pg_errors.UniqueViolation as exc:
            logger.warning(log_msg, extra={**log_extra, "error": str(exc)})
            raise DuplicateUserError(f"{log_msg}: {exc}", original_error=exc) from exc
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise DatabaseError(f"{log_msg}: {exc}") from exc

    # =========================================================
    # Public API
    # =========================================================
    def create(self, user: User) -> User:
        now = utcnow()
        columns = {
            "id": user.id,
            **_to_columns(
                {
                    field: getattr(user, field)
                    for field in _DIRECT_FIELDS - {"id", "created_at", "updated_at"}
                }
            ),
            **_to_columns({"pending_verification": user.pending_verification}),
            "created_at": now,
            "updated_at": now,
        }
        query = sql.SQL("INSERT INTO users ({cols}) VALUES ({values}) {returning}").format(
            cols=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
            returning=_RETURNING,
        )
        row = self._fetchone(
            query=query,
            params=columns.values(),
            log_msg="PostgresUserRepository: create failed",
            log_extra={"user_id": str(user.id)},
        )
        return _row_to_user(row) if row else None

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        row = self._fetchone(
            query=sql.SQL("{select} WHERE id = %s").format(select=_SELECT),
            params=(user_id,),
            log_msg="PostgresUserRepository: get_by_id failed",
            log_extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        row = self._fetchone(
            query=sql.SQL("{select} WHERE lower(email) = lower(%s)").format(
                select=_SELECT
            ),
            params=(email.strip(),),
            log_msg="PostgresUserRepository: get_by_email failed",
            log_extra={},
        )
        return _row_to_user(row) if row else None

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        row = self._fetchone(
            query=sql.SQL("{select} WHERE google_id = %s").format(select=_SELECT),
            params=(google_id,),
            log_msg="PostgresUserRepository: get_by_google_id failed",
            log_extra={},
        )
        return _row_to_user(row) if row else None

    def update(self, user_id: UUID, changes: Mapping[str, Any]) -> Optional[User]:
        columns = _to_columns(changes)
        columns["updated_at"] = utcnow()
        query = sql.SQL("UPDATE users SET {assignments} WHERE id = %s {returning}").format(
            assignments=sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(c)) for c in columns
            ),
            returning=_RETURNING,
        )
        row = self._fetchone(
            query=query,
            params=[*columns.values(), user_id],
            log_msg="PostgresUserRepository: update failed",
            log_extra={"user_id": str(user_id), "fields": sorted(changes)},
        )
        return _row_to_user(row) if row else None
