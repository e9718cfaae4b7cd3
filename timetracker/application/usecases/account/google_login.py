"""
===============================================================================
USE CASE: Google Login
===============================================================================

Name:
    GoogleLoginUseCase

Business Goal:
    Autenticar con un ID token de Google:
      - cuenta ya vinculada (google_id)      -> login
      - cuenta existente con el mismo email  -> vincular + login
      - sin cuenta                            -> crear + provisionar + login

Why (Context / Intención):
    - Una cuenta creada vía Google recibe un password aleatorio inutilizable:
      el campo nunca queda vacío y el login por password no aplica hasta un
      reset explícito.
    - El email verificado por Google cuenta como verificación propia.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Collaborators:
    - GoogleIdentityVerifier
    - UserRepository
    - PasswordHasher
    - EnsureUserDefaultsUseCase.provision
    - SessionIssuer

Error Mapping:
    - UNAUTHORIZED: ID token inválido
    - INTERNAL_ERROR: store sin registro, firma fallida
===============================================================================
"""

from __future__ import annotations

import secrets
from typing import Any, Dict
from uuid import uuid4

from ....crosscutting.exceptions import DuplicateUserError
from ....crosscutting.logger import logger
from ....domain.repositories import UserRepository
from ....domain.services import GoogleIdentity, GoogleIdentityVerifier, PasswordHasher
from ....identity.users import User
from ...provisioning import EnsureUserDefaultsUseCase
from ..results import AuthResult, bad_request, internal_error, unauthorized
from ..validation import validate_input
from .inputs import GoogleLoginInput
from .session import SessionIssuer


class GoogleLoginUseCase:
    def __init__(
        self,
        verifier: GoogleIdentityVerifier,
        users: UserRepository,
        hasher: PasswordHasher,
        provisioner: EnsureUserDefaultsUseCase,
        sessions: SessionIssuer,
    ) -> None:
        self._verifier = verifier
        self._users = users
        self._hasher = hasher
        self._provisioner = provisioner
        self._sessions = sessions

    def execute(self, data: GoogleLoginInput | dict) -> AuthResult:
        error, payload = validate_input(GoogleLoginInput, data)
        if error is not None:
            return AuthResult(error=bad_request(error, "User"))

        identity = self._verifier.verify(payload.id_token)
        if identity is None:
            return AuthResult(error=unauthorized("Invalid Google token"))

        user = self._users.get_by_google_id(identity.google_id)
        if user is None:
            existing = self._users.get_by_email(identity.email)
            user = (
                self._link(existing, identity)
                if existing is not None
                else self._create(identity)
            )
        if user is None:
            return AuthResult(
                error=internal_error("Google account could not be stored", "User")
            )

        return self._sessions.issue(user)

    def _link(self, user: User, identity: GoogleIdentity) -> User | None:
        changes: Dict[str, Any] = {"google_id": identity.google_id}
        if identity.picture and not user.picture:
            changes["picture"] = identity.picture
        if identity.email_verified and not user.email_verified:
            changes.update({"email_verified": True, "pending_verification": None})

        logger.info("Cuenta vinculada a Google", extra={"user_id": str(user.id)})
        return self._users.update(user.id, changes)

    def _create(self, identity: GoogleIdentity) -> User | None:
        email = identity.email.lower()
        try:
            created = self._users.create(
                User(
                    id=uuid4(),
                    name=identity.name or email.split("@", 1)[0],
                    email=email,
                    password_hash=self._hasher.hash(secrets.token_urlsafe(32)),
                    google_id=identity.google_id,
                    picture=identity.picture,
                    email_verified=identity.email_verified,
                )
            )
        except DuplicateUserError:
            # R: otro login concurrente creó la cuenta primero; se reusa.
            return self._users.get_by_google_id(identity.google_id) or (
                self._users.get_by_email(email)
            )
        if created is None:
            return None

        logger.info("Cuenta creada vía Google", extra={"user_id": str(created.id)})
        return self._provisioner.provision(created.id) or created
