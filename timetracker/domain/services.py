"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de servicios externos (Protocols)

Responsabilidades:
    - Abstraer colaboradores que el núcleo consume como capacidades:
        * PasswordHasher: hash unidireccional + comparación
        * TokenService: firmar/verificar tokens con propósito y expiración
        * EmailSender: enviar (to, subject, html)
        * GoogleIdentityVerifier: validar un ID token de Google

Colaboradores:
    - identity.auth_users (Argon2PasswordHasher, JWTTokenService)
    - infrastructure.services.email (SmtpEmailSender, ConsoleEmailSender)
    - infrastructure.services.google_identity (GoogleIdentityVerifier)
    - application/usecases/account (consumidores)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Mapping, Optional, Protocol


class TokenPurpose(str, Enum):
    """
    Propósito embebido en cada token.

    Un token firmado para un propósito no sirve para otro (ej: un token de
    reset de password no autentica una sesión).
    """

    SESSION = "session"
    PASSWORD_RESET = "password_reset"
    EMAIL_VERIFICATION = "email_verification"


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        ...


class TokenService(Protocol):
    def sign(
        self,
        payload: Mapping[str, Any],
        *,
        purpose: TokenPurpose,
        lifetime: timedelta,
    ) -> Optional[str]:
        """R: Token firmado, o None si no se pudo firmar."""
        ...

    def verify(self, token: str, *, purpose: TokenPurpose) -> Optional[dict]:
        """R: Payload si el token es válido, vigente y del propósito pedido."""
        ...


class EmailSender(Protocol):
    def send(self, to: str, subject: str, html: str) -> None:
        """R: Envía el email; lanza EmailDeliveryError si falla."""
        ...


@dataclass(frozen=True, slots=True)
class GoogleIdentity:
    """Identidad verificada de Google."""

    google_id: str
    email: str
    name: str
    picture: str | None = None
    email_verified: bool = False


class GoogleIdentityVerifier(Protocol):
    def verify(self, id_token: str) -> Optional[GoogleIdentity]:
        ...
