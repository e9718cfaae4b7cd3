"""
===============================================================================
USE CASES: Passwords (change / forgot / reset)
===============================================================================

Business Goal:
    Permitir al usuario cambiar su password (conociendo el actual) o
    recuperarlo vía un token de reset enviado por email.

Why (Context / Intención):
    - forgot-password responde SIEMPRE lo mismo: no revela si el email
      existe (anti-enumeración).
    - El token de reset lleva propósito PASSWORD_RESET: no sirve como sesión
      ni como verificación de email.
    - Fallas de envío de email se loguean y no cambian la respuesta.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Classes:
    ChangePasswordUseCase, ForgotPasswordUseCase, ResetPasswordUseCase

Collaborators:
    - UserRepository
    - PasswordHasher
    - TokenService (purpose=PASSWORD_RESET)
    - EmailSender + email_templates

-------------------------------------------------------------------------------
Error Mapping:
    - BAD_REQUEST: input inválido, password actual incorrecto
    - UNAUTHORIZED: token de reset inválido / expirado / de otro propósito
    - NOT_FOUND: la cuenta ya no existe
    - INTERNAL_ERROR: el store no devolvió el usuario actualizado
===============================================================================
"""

from __future__ import annotations

from datetime import timedelta
from uuid import UUID

from ....crosscutting.exceptions import EmailDeliveryError
from ....crosscutting.logger import logger
from ....domain.repositories import UserRepository
from ....domain.services import EmailSender, PasswordHasher, TokenPurpose, TokenService
from ....identity.users import User
from ..results import (
    ActionResult,
    bad_request,
    internal_error,
    not_found,
    unauthorized,
)
from ..validation import validate_input
from .email_templates import render_password_reset_email
from .inputs import ChangePasswordInput, ForgotPasswordInput, ResetPasswordInput

DEFAULT_RESET_TTL = timedelta(hours=1)

FORGOT_PASSWORD_MESSAGE = (
    "If an account with that email exists, a password reset link has been sent"
)
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def user_id_from_claims(claims: dict) -> UUID | None:
    """id embebido en un token ya verificado (None si no tiene forma de UUID)."""
    try:
        return UUID(str(claims.get("id")))
    except ValueError:
        return None


class ChangePasswordUseCase:
    def __init__(self, users: UserRepository, hasher: PasswordHasher) -> None:
        self._users = users
        self._hasher = hasher

    def execute(self, user_id: UUID, data: ChangePasswordInput | dict) -> ActionResult:
        error, payload = validate_input(ChangePasswordInput, data)
        if error is not None:
            return ActionResult(error=bad_request(error, "User"))

        user = self._users.get_by_id(user_id)
        if user is None:
            return ActionResult(error=not_found("User"))

        # R: re-validar el password actual antes de sobrescribir.
        if not self._hasher.verify(payload.current_password, user.password_hash):
            return ActionResult(
                error=bad_request("Current password is incorrect", "User")
            )

        return _store_password(
            self._users, self._hasher, user.id, payload.new_password, "Password updated"
        )


class ForgotPasswordUseCase:
    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        emails: EmailSender,
        *,
        frontend_url: str,
        lifetime: timedelta = DEFAULT_RESET_TTL,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._emails = emails
        self._frontend_url = frontend_url
        self._lifetime = lifetime

    def execute(self, data: ForgotPasswordInput | dict) -> ActionResult:
        error, payload = validate_input(ForgotPasswordInput, data)
        if error is not None:
            return ActionResult(error=bad_request(error, "User"))

        user = self._users.get_by_email(payload.email)
        if user is not None:
            self._send_reset_link(user)

        # R: misma respuesta exista o no la cuenta.
        return ActionResult(ok=True, message=FORGOT_PASSWORD_MESSAGE)

    def _send_reset_link(self, user: User) -> None:
        token = self._tokens.sign(
            {"id": str(user.id)},
            purpose=TokenPurpose.PASSWORD_RESET,
            lifetime=self._lifetime,
        )
        if token is None:
            logger.error("Token de reset no emitido", extra={"user_id": str(user.id)})
            return

        email = render_password_reset_email(
            user.preferred_language, self._frontend_url, token
        )
        try:
            self._emails.send(user.email, email.subject, email.html)
        except EmailDeliveryError:
            logger.exception(
                "No se pudo enviar email de reset", extra={"user_id": str(user.id)}
            )
            return

        logger.info("Email de reset enviado", extra={"user_id": str(user.id)})


class ResetPasswordUseCase:
    def __init__(
        self, users: UserRepository, hasher: PasswordHasher, tokens: TokenService
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens

    def execute(self, data: ResetPasswordInput | dict) -> ActionResult:
        error, payload = validate_input(ResetPasswordInput, data)
        if error is not None:
            return ActionResult(error=bad_request(error, "User"))

        claims = self._tokens.verify(payload.token, purpose=TokenPurpose.PASSWORD_RESET)
        user_id = user_id_from_claims(claims) if claims else None
        if user_id is None:
            return ActionResult(error=unauthorized(INVALID_TOKEN_MESSAGE))

        if self._users.get_by_id(user_id) is None:
            return ActionResult(error=not_found("User"))

        return _store_password(
            self._users,
            self._hasher,
            user_id,
            payload.new_password,
            "Password has been reset",
        )


def _store_password(
    users: UserRepository,
    hasher: PasswordHasher,
    user_id: UUID,
    new_password: str,
    message: str,
) -> ActionResult:
    updated = users.update(user_id, {"password_hash": hasher.hash(new_password)})
    if updated is None:
        return ActionResult(error=internal_error("Password could not be updated", "User"))

    logger.info("Password actualizado", extra={"user_id": str(user_id)})
    return ActionResult(ok=True, message=message)
