"""
===============================================================================
TARJETA CRC — schemas/accounts.py
===============================================================================

Módulo:
    Schemas HTTP de cuenta (usuario público + sesión)

Responsabilidades:
    - Exponer el usuario SIN password_hash ni token de verificación.
    - Respuesta de sesión: token + tipo + usuario.

Colaboradores:
    - identity.users.User / Language / Theme
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from .....identity.users import Language, Theme, User


class UserRes(BaseModel):
    id: UUID
    name: str
    email: str
    preferred_language: Language
    theme: Theme
    default_timer_preset_id: UUID | None = None
    picture: str | None = None
    email_verified: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthRes(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserRes


def to_user_res(user: User) -> UserRes:
    """Mapea User -> DTO público."""
    return UserRes(
        id=user.id,
        name=user.name,
        email=user.email,
        preferred_language=user.preferred_language,
        theme=user.theme,
        default_timer_preset_id=user.default_timer_preset_id,
        picture=user.picture,
        email_verified=user.email_verified,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
