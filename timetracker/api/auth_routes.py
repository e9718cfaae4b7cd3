"""
===============================================================================
TARJETA CRC — timetracker/api/auth_routes.py (Autenticación y Verificación)
===============================================================================

Responsabilidades:
  - Exponer registro, login (password y Google) con sesión JWT.
  - Gestionar cookie httpOnly de sesión de forma consistente.
  - Exponer recuperación de password (forgot / reset).
  - Exponer verificación de email (request / verify / status).
  - Limitar por IP login, registro, recuperación y envío de emails (429).

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP <-> caso de uso.
  - Fail-safe security: si la autenticación falla, se deniega por defecto.

Colaboradores:
  - application.usecases.account (casos de uso + inputs)
  - container (factories DI)
  - crosscutting.rate_limit (límites por grupo de rutas)
  - interfaces.api.http.dependencies.require_user
  - interfaces.api.http.error_mapping.unwrap
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from ..application.usecases.account import (
    ForgotPasswordInput,
    ForgotPasswordUseCase,
    GetVerificationStatusUseCase,
    GoogleLoginInput,
    GoogleLoginUseCase,
    LoginInput,
    LoginUserUseCase,
    RegisterInput,
    RegisterUserUseCase,
    RequestVerificationInput,
    RequestVerificationUseCase,
    ResetPasswordInput,
    ResetPasswordUseCase,
    VerifyEmailInput,
    VerifyEmailUseCase,
)
from ..application.usecases.results import AuthResult
from ..container import (
    get_forgot_password_use_case,
    get_google_login_use_case,
    get_login_user_use_case,
    get_register_user_use_case,
    get_request_verification_use_case,
    get_reset_password_use_case,
    get_verification_status_use_case,
    get_verify_email_use_case,
)
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..crosscutting.rate_limit import RateLimitPolicy, rate_limit
from ..identity.auth_users import DEFAULT_ACCESS_TOKEN_COOKIE
from ..identity.users import User
from ..interfaces.api.http.dependencies import require_user
from ..interfaces.api.http.error_mapping import unwrap
from ..interfaces.api.http.schemas.accounts import AuthRes, to_user_res
from ..interfaces.api.http.schemas.common import MessageRes, VerificationStatusRes

router = APIRouter(prefix="/auth", tags=["auth"], responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _set_session_cookie(response: Response, token: str) -> None:
    """Setea cookie httpOnly de sesión (misma vida que el JWT)."""
    settings = get_settings()
    response.set_cookie(
        key=settings.jwt_cookie_name or DEFAULT_ACCESS_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.is_production(),
        samesite="lax",
        max_age=settings.jwt_session_ttl_days * 24 * 60 * 60,
        path="/",
    )


def _session_response(result: AuthResult, response: Response) -> AuthRes:
    unwrap(result)
    _set_session_cookie(response, result.token)
    return AuthRes(token=result.token, user=to_user_res(result.user))


# -----------------------------------------------------------------------------
# Sesión
# -----------------------------------------------------------------------------


@router.post(
    "/register",
    response_model=AuthRes,
    status_code=201,
    dependencies=[Depends(rate_limit(RateLimitPolicy.REGISTRATION))],
)
def register(
    data: RegisterInput,
    response: Response,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    """
    Registra la cuenta y devuelve sesión.

    Los defaults (proyecto + presets) se siembran best-effort: su falla no
    rompe el registro.
    """
    return _session_response(use_case.execute(data), response)


@router.post(
    "/login",
    response_model=AuthRes,
    dependencies=[Depends(rate_limit(RateLimitPolicy.AUTH))],
)
def login(
    data: LoginInput,
    response: Response,
    use_case: LoginUserUseCase = Depends(get_login_user_use_case),
):
    return _session_response(use_case.execute(data), response)


@router.post(
    "/google",
    response_model=AuthRes,
    dependencies=[Depends(rate_limit(RateLimitPolicy.AUTH))],
)
def google_login(
    data: GoogleLoginInput,
    response: Response,
    use_case: GoogleLoginUseCase = Depends(get_google_login_use_case),
):
    return _session_response(use_case.execute(data), response)


# -----------------------------------------------------------------------------
# Recuperación de password
# -----------------------------------------------------------------------------


@router.post(
    "/forgot-password",
    response_model=MessageRes,
    dependencies=[Depends(rate_limit(RateLimitPolicy.PASSWORD_RESET))],
)
def forgot_password(
    data: ForgotPasswordInput,
    use_case: ForgotPasswordUseCase = Depends(get_forgot_password_use_case),
):
    """Misma respuesta exista o no el email."""
    return MessageRes(message=unwrap(use_case.execute(data)).message)


@router.post(
    "/reset-password",
    response_model=MessageRes,
    dependencies=[Depends(rate_limit(RateLimitPolicy.PASSWORD_RESET))],
)
def reset_password(
    data: ResetPasswordInput,
    use_case: ResetPasswordUseCase = Depends(get_reset_password_use_case),
):
    return MessageRes(message=unwrap(use_case.execute(data)).message)


# -----------------------------------------------------------------------------
# Verificación de email
# -----------------------------------------------------------------------------


@router.post(
    "/verification/request",
    response_model=MessageRes,
    dependencies=[Depends(rate_limit(RateLimitPolicy.EMAIL))],
)
def request_verification(
    data: RequestVerificationInput,
    user: User = Depends(require_user),
    use_case: RequestVerificationUseCase = Depends(get_request_verification_use_case),
):
    return MessageRes(message=unwrap(use_case.execute(user.id, data)).message)


@router.post("/verification/verify", response_model=MessageRes)
def verify_email(
    data: VerifyEmailInput,
    use_case: VerifyEmailUseCase = Depends(get_verify_email_use_case),
):
    return MessageRes(message=unwrap(use_case.execute(data)).message)


@router.get("/verification/status", response_model=VerificationStatusRes)
def verification_status(
    user: User = Depends(require_user),
    use_case: GetVerificationStatusUseCase = Depends(get_verification_status_use_case),
):
    result = unwrap(use_case.execute(user.id))
    return VerificationStatusRes(
        verified=result.verified, pending=result.pending, expires_at=result.expires_at
    )


__all__ = ["router"]
