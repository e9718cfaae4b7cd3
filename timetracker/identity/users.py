"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelo de Usuario (cuenta dueña de todos los recursos)

Responsabilidades:
    - Definir el registro de usuario usado por auth, perfil y verificación.
    - Definir catálogos de preferencias (idioma, tema).
    - Representar el estado de verificación de email de forma explícita:
      flag booleano + solicitud pendiente (token, expiración).

Colaboradores:
    - identity.auth_users: emite/valida tokens para este User.
    - domain.repositories.UserRepository: persiste este modelo.
    - application/usecases/account: registra, autentica y verifica.

Notas:
    - Este módulo NO contiene lógica de negocio: solo “shapes” de datos.
    - password_hash nunca es el password en claro.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class Language(str, Enum):
    """Idiomas con set de mensajes pre-renderizado."""

    ES = "es"
    EN = "en"
    TR = "tr"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True, slots=True)
class PendingVerification:
    """Solicitud de verificación de email en curso."""

    token: str
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class User:
    """Cuenta de usuario."""

    id: UUID
    name: str
    email: str
    password_hash: str
    preferred_language: Language = Language.EN
    theme: Theme = Theme.LIGHT
    default_timer_preset_id: UUID | None = None
    google_id: str | None = None
    picture: str | None = None
    email_verified: bool = False
    pending_verification: PendingVerification | None = None
    last_verification_request: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
