"""
===============================================================================
USE CASE: Register User
===============================================================================

Name:
    RegisterUserUseCase

Business Goal:
    Crear una cuenta nueva con email único, password hasheado y los datos
    por defecto (proyecto "Focus" + presets), devolviendo una sesión lista.

Why (Context / Intención):
    - El provisioning es best-effort: una falla persistente NO bloquea la
      registración (queda recuperable vía POST /users/me/defaults).
    - El token de sesión se emite al final, con el usuario ya provisionado.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    RegisterUserUseCase

Responsibilities:
    - Validar input (email, password >= 6, idioma, tema).
    - Verificar unicidad de email (case-insensitive).
    - Hashear el password y persistir el User.
    - Disparar provisioning (con reintentos) y emitir el token de sesión.

Collaborators:
    - UserRepository
    - PasswordHasher
    - EnsureUserDefaultsUseCase.provision
    - SessionIssuer

-------------------------------------------------------------------------------
Error Mapping:
    - BAD_REQUEST: input inválido, email ya registrado
    - INTERNAL_ERROR: el store no devolvió el usuario, firma de token fallida
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4

from ....crosscutting.exceptions import DuplicateUserError
from ....crosscutting.logger import logger
from ....domain.repositories import UserRepository
from ....domain.services import PasswordHasher
from ....identity.users import User
from ...provisioning import EnsureUserDefaultsUseCase
from ..results import AuthResult, bad_request, internal_error
from ..validation import validate_input
from .inputs import RegisterInput
from .session import SessionIssuer


class RegisterUserUseCase:
    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        provisioner: EnsureUserDefaultsUseCase,
        sessions: SessionIssuer,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._provisioner = provisioner
        self._sessions = sessions

    def execute(self, data: RegisterInput | dict) -> AuthResult:
        # ---------------------------------------------------------------------
        # 1) Validar input.
        # ---------------------------------------------------------------------
        error, payload = validate_input(RegisterInput, data)
        if error is not None:
            return AuthResult(error=bad_request(error, "User"))

        # ---------------------------------------------------------------------
        # 2) Unicidad de email.
        # ---------------------------------------------------------------------
        if self._users.get_by_email(payload.email) is not None:
            return AuthResult(error=bad_request("User already exists", "User"))

        # ---------------------------------------------------------------------
        # 3) Crear usuario (password solo como hash).
        #    R: el índice único del store decide ante registros concurrentes.
        # ---------------------------------------------------------------------
        try:
            created = self._users.create(
                User(
                    id=uuid4(),
                    name=payload.name,
                    email=payload.email,
                    password_hash=self._hasher.hash(payload.password),
                    preferred_language=payload.preferred_language,
                    theme=payload.theme,
                )
            )
        except DuplicateUserError:
            return AuthResult(error=bad_request("User already exists", "User"))
        if created is None:
            return AuthResult(error=internal_error("User could not be created", "User"))

        logger.info("Usuario registrado", extra={"user_id": str(created.id)})

        # ---------------------------------------------------------------------
        # 4) Provisioning best-effort (nunca lanza).
        # ---------------------------------------------------------------------
        provisioned = self._provisioner.provision(created.id)
        user = provisioned or self._users.get_by_id(created.id) or created

        # ---------------------------------------------------------------------
        # 5) Sesión.
        # ---------------------------------------------------------------------
        return self._sessions.issue(user)
