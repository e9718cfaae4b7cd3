"""
===============================================================================
USE CASE: Login User
===============================================================================

Responsibilities:
    - Buscar la cuenta por email y comparar el password contra el hash.
    - Mismo error (UNAUTHORIZED "Invalid credentials") si el email no existe
      o el password no coincide.
    - Emitir el token de sesión.
===============================================================================
"""

from __future__ import annotations

from ....crosscutting.logger import logger
from ....domain.repositories import UserRepository
from ....domain.services import PasswordHasher
from ..results import AuthResult, bad_request, unauthorized
from ..validation import validate_input
from .inputs import LoginInput
from .session import SessionIssuer


class LoginUserUseCase:
    def __init__(
        self, users: UserRepository, hasher: PasswordHasher, sessions: SessionIssuer
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._sessions = sessions

    def execute(self, data: LoginInput | dict) -> AuthResult:
        error, payload = validate_input(LoginInput, data)
        if error is not None:
            return AuthResult(error=bad_request(error, "User"))

        user = self._users.get_by_email(payload.email)
        if user is None or not self._hasher.verify(payload.password, user.password_hash):
            logger.info("Login rechazado")
            return AuthResult(error=unauthorized())

        return self._sessions.issue(user)
