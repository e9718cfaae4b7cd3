"""
===============================================================================
USE CASES: Email Verification (request / verify / status)
===============================================================================

Business Goal:
    Confirmar que el usuario controla el email de su cuenta.

Why (Context / Intención):
    - El estado es explícito: email_verified (bool) + pending_verification
      (token, expires_at) + last_verification_request. No se infiere
      "verificado" a partir de un token guardado.
    - verify es idempotente: re-presentar un token válido sobre una cuenta
      ya verificada responde OK sin tocar nada.
    - El token lleva {id, email}: si el email de la cuenta cambió desde
      que se emitió, el token ya no verifica nada.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Classes:
    RequestVerificationUseCase, VerifyEmailUseCase,
    GetVerificationStatusUseCase

Collaborators:
    - UserRepository
    - TokenService (purpose=EMAIL_VERIFICATION)
    - EmailSender + email_templates

-------------------------------------------------------------------------------
Error Mapping:
    - BAD_REQUEST: ya verificado, email distinto al de la cuenta, pedido
      dentro del cooldown
    - UNAUTHORIZED: token inválido / expirado / de otro propósito
    - NOT_FOUND: la cuenta no existe
    - INTERNAL_ERROR: firma fallida o store sin registro
===============================================================================
"""

from __future__ import annotations

from datetime import timedelta
from uuid import UUID

from ....crosscutting.exceptions import EmailDeliveryError
from ....crosscutting.logger import logger
from ....domain.entities import utcnow
from ....domain.repositories import UserRepository
from ....domain.services import EmailSender, TokenPurpose, TokenService
from ....identity.users import PendingVerification
from ..results import (
    ActionResult,
    VerificationStatusResult,
    bad_request,
    internal_error,
    not_found,
    unauthorized,
)
from ..validation import validate_input
from .email_templates import render_verification_email
from .inputs import RequestVerificationInput, VerifyEmailInput
from .passwords import INVALID_TOKEN_MESSAGE, user_id_from_claims

DEFAULT_VERIFICATION_TTL = timedelta(hours=24)
DEFAULT_COOLDOWN = timedelta(seconds=60)


class RequestVerificationUseCase:
    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        emails: EmailSender,
        *,
        frontend_url: str,
        lifetime: timedelta = DEFAULT_VERIFICATION_TTL,
        cooldown: timedelta = DEFAULT_COOLDOWN,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._emails = emails
        self._frontend_url = frontend_url
        self._lifetime = lifetime
        self._cooldown = cooldown

    def execute(
        self, user_id: UUID, data: RequestVerificationInput | dict
    ) -> ActionResult:
        # ---------------------------------------------------------------------
        # 1) Validar input + estado de la cuenta.
        # ---------------------------------------------------------------------
        error, payload = validate_input(RequestVerificationInput, data)
        if error is not None:
            return ActionResult(error=bad_request(error, "User"))

        user = self._users.get_by_id(user_id)
        if user is None:
            return ActionResult(error=not_found("User"))
        if user.email_verified:
            return ActionResult(error=bad_request("Email already verified", "User"))
        if payload.email != user.email.lower():
            return ActionResult(
                error=bad_request("Email does not match the account email", "User")
            )

        now = utcnow()
        last = user.last_verification_request
        if last is not None and now - last < self._cooldown:
            return ActionResult(
                error=bad_request(
                    "Verification already requested, try again later", "User"
                )
            )

        # ---------------------------------------------------------------------
        # 2) Emitir token y registrarlo como pendiente.
        # ---------------------------------------------------------------------
        token = self._tokens.sign(
            {"id": str(user.id), "email": user.email},
            purpose=TokenPurpose.EMAIL_VERIFICATION,
            lifetime=self._lifetime,
        )
        if token is None:
            return ActionResult(
                error=internal_error("Could not generate verification token", "User")
            )

        updated = self._users.update(
            user.id,
            {
                "pending_verification": PendingVerification(
                    token=token, expires_at=now + self._lifetime
                ),
                "last_verification_request": now,
            },
        )
        if updated is None:
            return ActionResult(
                error=internal_error("Verification could not be stored", "User")
            )

        # ---------------------------------------------------------------------
        # 3) Envío best-effort.
        # ---------------------------------------------------------------------
        email = render_verification_email(
            user.preferred_language, self._frontend_url, token
        )
        try:
            self._emails.send(user.email, email.subject, email.html)
        except EmailDeliveryError:
            logger.exception(
                "No se pudo enviar email de verificación",
                extra={"user_id": str(user.id)},
            )

        return ActionResult(ok=True, message="Verification email sent")


class VerifyEmailUseCase:
    def __init__(self, users: UserRepository, tokens: TokenService) -> None:
        self._users = users
        self._tokens = tokens

    def execute(self, data: VerifyEmailInput | dict) -> ActionResult:
        error, payload = validate_input(VerifyEmailInput, data)
        if error is not None:
            return ActionResult(error=bad_request(error, "User"))

        claims = self._tokens.verify(
            payload.token, purpose=TokenPurpose.EMAIL_VERIFICATION
        )
        user_id = user_id_from_claims(claims) if claims else None
        if user_id is None:
            return ActionResult(error=unauthorized(INVALID_TOKEN_MESSAGE))

        user = self._users.get_by_id(user_id)
        if user is None:
            return ActionResult(error=not_found("User"))

        if str(claims.get("email", "")).lower() != user.email.lower():
            return ActionResult(
                error=bad_request("Token does not match the account email", "User")
            )

        if user.email_verified:
            return ActionResult(ok=True, message="Email already verified")

        updated = self._users.update(
            user.id, {"email_verified": True, "pending_verification": None}
        )
        if updated is None:
            return ActionResult(
                error=internal_error("Verification could not be stored", "User")
            )

        logger.info("Email verificado", extra={"user_id": str(user.id)})
        return ActionResult(ok=True, message="Email verified")


class GetVerificationStatusUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: UUID) -> VerificationStatusResult:
        user = self._users.get_by_id(user_id)
        if user is None:
            return VerificationStatusResult(error=not_found("User"))

        pending = user.pending_verification
        return VerificationStatusResult(
            verified=user.email_verified,
            pending=(
                not user.email_verified
                and pending is not None
                and pending.expires_at > utcnow()
            ),
            expires_at=pending.expires_at if pending else None,
        )
