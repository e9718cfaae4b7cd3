"""
===============================================================================
TARJETA CRC — dependencies.py (Dependencias comunes de routers)
===============================================================================

Responsabilidades:
  - Resolver el usuario autenticado a partir del token de sesión
    (Authorization: Bearer o cookie httpOnly).
  - Rechazar tokens de otro propósito (reset / verificación) con 401.
  - Propagar user_id al contexto de logging.
  - Centralizar parámetros de paginación (page / limit) de query string.

Colaboradores:
  - identity.auth_users.extract_access_token
  - domain.services.TokenPurpose
  - container (token service + user repository)
  - crosscutting.error_responses.unauthorized
  - context.set_user_context
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Header, Query, Request

from ....container import get_token_service, get_user_repository
from ....context import set_user_context
from ....crosscutting.error_responses import unauthorized
from ....domain.repositories import UserRepository
from ....domain.services import TokenPurpose, TokenService
from ....identity.auth_users import extract_access_token
from ....identity.users import User


def _user_id_from(claims: dict) -> UUID | None:
    try:
        return UUID(str(claims.get("id")))
    except (TypeError, ValueError):
        return None


def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Usuario dueño de la sesión.

    Token ausente, inválido, expirado, de otro propósito o de un usuario que
    ya no existe => 401.
    """
    token = extract_access_token(request, authorization)
    if not token:
        raise unauthorized()

    claims = tokens.verify(token, purpose=TokenPurpose.SESSION)
    if claims is None:
        raise unauthorized("Invalid or expired token")

    user_id = _user_id_from(claims)
    user = users.get_by_id(user_id) if user_id else None
    if user is None:
        raise unauthorized("Invalid or expired token")

    set_user_context(str(user.id))
    return user


@dataclass(frozen=True)
class PageParams:
    page: int | None
    limit: int | None


def page_params(
    page: int | None = Query(default=None),
    limit: int | None = Query(default=None),
) -> PageParams:
    """
    page/limit crudos.

    La validación (>= 1, tope) la hace el servicio para devolver el mismo
    BAD_REQUEST que cualquier otro input inválido.
    """
    return PageParams(page=page, limit=limit)
