"""
===============================================================================
TARJETA CRC — identity/auth_users.py
===============================================================================

Módulo:
    Primitivas de autenticación (Argon2 + JWT con propósito)

Responsabilidades:
    - Hashear/verificar passwords (Argon2).
    - Firmar tokens con expiración y propósito (session / password_reset /
      email_verification) usando un único primitivo JWT (HS256).
    - Verificar tokens: firma, expiración, claims mínimos y propósito.
    - Extraer el token de sesión desde Authorization: Bearer o cookie.

Colaboradores:
    - domain.services: PasswordHasher / TokenService / TokenPurpose (puertos).
    - crosscutting.config.get_settings: secreto y nombre de cookie.
    - crosscutting.logger: logging estructurado.

Decisiones de diseño:
    - La lógica criptográfica vive acá (borde de identidad), NO en dominio.
    - sign()/verify() devuelven None ante falla: el caso de uso decide el
      error de negocio (INTERNAL_ERROR / UNAUTHORIZED).
    - Un token firmado para un propósito es rechazado para cualquier otro.
    - No loguear secretos ni tokens; solo info mínima y segura.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

import jwt
from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi import Request

from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..domain.services import TokenPurpose

JWT_ALGORITHM: str = "HS256"

# R: fallback si Settings no define cookie.
DEFAULT_ACCESS_TOKEN_COOKIE: str = "access_token"

CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_PURPOSE: str = "purpose"

_RESERVED_CLAIMS = frozenset({CLAIM_IAT, CLAIM_EXP, CLAIM_PURPOSE})

_password_hasher = _Argon2Hasher()


# ---------------------------------------------------------------------------
# Passwords (Argon2)
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    """Hashea un password usando Argon2."""
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verifica password vs hash almacenado (comparación constante de Argon2)."""
    if not password_hash:
        return False
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


class Argon2PasswordHasher:
    """Adapter del puerto PasswordHasher."""

    def hash(self, password: str) -> str:
        return hash_password(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return verify_password(password, password_hash)


# ---------------------------------------------------------------------------
# Tokens JWT (firmar / verificar)
# ---------------------------------------------------------------------------


class JWTTokenService:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      JWTTokenService

    Responsabilidades:
      - sign(payload, purpose, lifetime) -> token | None
      - verify(token, purpose) -> payload | None

    Colaboradores:
      - PyJWT (HS256)
    ----------------------------------------------------------------------------
    """

    def __init__(self, secret: str | None = None, *, algorithm: str = JWT_ALGORITHM):
        self._secret = secret if secret is not None else get_settings().jwt_secret
        self._algorithm = algorithm

    def sign(
        self,
        payload: Mapping[str, Any],
        *,
        purpose: TokenPurpose,
        lifetime: timedelta,
    ) -> Optional[str]:
        now = datetime.now(timezone.utc)
        claims: dict[str, Any] = {
            k: v for k, v in payload.items() if k not in _RESERVED_CLAIMS
        }
        claims.update(
            {
                CLAIM_IAT: int(now.timestamp()),
                CLAIM_EXP: int((now + lifetime).timestamp()),
                CLAIM_PURPOSE: TokenPurpose(purpose).value,
            }
        )

        try:
            return jwt.encode(claims, self._secret, algorithm=self._algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            logger.exception(
                "No se pudo firmar token",
                extra={"purpose": TokenPurpose(purpose).value, "error": str(exc)},
            )
            return None

    def verify(self, token: str, *, purpose: TokenPurpose) -> Optional[dict]:
        if not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": [CLAIM_EXP, CLAIM_PURPOSE]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Token expirado", extra={"purpose": purpose.value})
            return None
        except jwt.InvalidTokenError:
            logger.info("Token inválido", extra={"purpose": purpose.value})
            return None

        if claims.get(CLAIM_PURPOSE) != TokenPurpose(purpose).value:
            logger.warning(
                "Token usado fuera de su propósito",
                extra={
                    "expected_purpose": TokenPurpose(purpose).value,
                    "token_purpose": claims.get(CLAIM_PURPOSE),
                },
            )
            return None

        return {k: v for k, v in claims.items() if k not in _RESERVED_CLAIMS}


# ---------------------------------------------------------------------------
# Extracción de token (header/cookie)
# ---------------------------------------------------------------------------


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def extract_access_token(request: Request, authorization: str | None) -> str | None:
    """Resuelve token desde Authorization o cookie."""
    token = _extract_bearer_token(authorization)
    if token:
        return token

    cookie_name = (
        get_settings().jwt_cookie_name or ""
    ).strip() or DEFAULT_ACCESS_TOKEN_COOKIE
    return request.cookies.get(cookie_name)
