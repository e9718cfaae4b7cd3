"""
===============================================================================
SESSION ISSUER (token de sesión para register / login / google)
===============================================================================

Responsibilities:
    - Firmar el token de sesión {id} con propósito SESSION.
    - Convertir una falla de firma en INTERNAL_ERROR (nunca devolver un
      usuario autenticado sin token).

Collaborators:
    - domain.services.TokenService
    - application.usecases.results.AuthResult
===============================================================================
"""

from __future__ import annotations

from datetime import timedelta

from ....crosscutting.logger import logger
from ....domain.services import TokenPurpose, TokenService
from ....identity.users import User
from ..results import AuthResult, internal_error

DEFAULT_SESSION_TTL = timedelta(days=30)


class SessionIssuer:
    def __init__(
        self, tokens: TokenService, *, lifetime: timedelta = DEFAULT_SESSION_TTL
    ) -> None:
        self._tokens = tokens
        self._lifetime = lifetime

    def issue(self, user: User) -> AuthResult:
        token = self._tokens.sign(
            {"id": str(user.id)},
            purpose=TokenPurpose.SESSION,
            lifetime=self._lifetime,
        )
        if token is None:
            logger.error("Token de sesión no emitido", extra={"user_id": str(user.id)})
            return AuthResult(error=internal_error("Could not generate token", "User"))
        return AuthResult(user=user, token=token)
