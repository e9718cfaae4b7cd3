"""
===============================================================================
TARJETA CRC — timetracker/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, servicios, adapters) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache): repos in-memory, lock por
    usuario y servicios deben ser únicos por proceso.
  - Centralizar decisiones runtime basadas en Settings:
      * APP_ENV test/testing/ci => repos in-memory
      * email_backend smtp|console

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories.* / domain.services.* (puertos)
  - infrastructure.* (implementaciones)
  - application.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
===============================================================================
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from .application.provisioning import EnsureUserDefaultsUseCase
from .application.usecases.account import (
    ChangePasswordUseCase,
    ForgotPasswordUseCase,
    GetProfileUseCase,
    GetVerificationStatusUseCase,
    GoogleLoginUseCase,
    LoginUserUseCase,
    RegisterUserUseCase,
    RequestVerificationUseCase,
    ResetPasswordUseCase,
    SessionIssuer,
    UpdateProfileUseCase,
    VerifyEmailUseCase,
)
from .application.usecases.resources import (
    ClientService,
    ProjectService,
    TagService,
    TaskService,
    TimerPresetService,
)
from .application.usecases.time_entries import TimeEntryService
from .crosscutting.config import get_settings
from .crosscutting.locks import KeyedLock
from .domain.entities import Client, Project, Tag, Task, TimerPreset
from .domain.repositories import (
    OwnedResourceRepository,
    TimeEntryRepository,
    UserRepository,
)
from .domain.services import (
    EmailSender,
    GoogleIdentityVerifier,
    PasswordHasher,
    TokenService,
)
from .identity.auth_users import Argon2PasswordHasher, JWTTokenService
from .infrastructure.repositories import (
    InMemoryOwnedResourceRepository,
    InMemoryTimeEntryRepository,
    InMemoryUserRepository,
    PostgresTimeEntryRepository,
    PostgresUserRepository,
)
from .infrastructure.repositories.postgres import (
    client_repository,
    project_repository,
    tag_repository,
    task_repository,
    timer_preset_repository,
)
from .infrastructure.services.email import ConsoleEmailSender, SmtpEmailSender
from .infrastructure.services.google_identity import GoogleTokenInfoVerifier

# =============================================================================
# Helpers internos
# =============================================================================


def _is_test_env() -> bool:
    return get_settings().is_test()


def _paging() -> dict:
    settings = get_settings()
    return {
        "default_limit": settings.default_page_limit,
        "max_limit": settings.max_page_limit,
    }


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    if _is_test_env():
        return InMemoryUserRepository()
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_client_repository() -> OwnedResourceRepository[Client]:
    if _is_test_env():
        return InMemoryOwnedResourceRepository()
    return client_repository()


@lru_cache(maxsize=1)
def get_project_repository() -> OwnedResourceRepository[Project]:
    if _is_test_env():
        return InMemoryOwnedResourceRepository()
    return project_repository()


@lru_cache(maxsize=1)
def get_task_repository() -> OwnedResourceRepository[Task]:
    if _is_test_env():
        return InMemoryOwnedResourceRepository()
    return task_repository()


@lru_cache(maxsize=1)
def get_tag_repository() -> OwnedResourceRepository[Tag]:
    if _is_test_env():
        return InMemoryOwnedResourceRepository()
    return tag_repository()


@lru_cache(maxsize=1)
def get_timer_preset_repository() -> OwnedResourceRepository[TimerPreset]:
    if _is_test_env():
        return InMemoryOwnedResourceRepository()
    return timer_preset_repository()


@lru_cache(maxsize=1)
def get_time_entry_repository() -> TimeEntryRepository:
    if _is_test_env():
        return InMemoryTimeEntryRepository()
    return PostgresTimeEntryRepository()


# =============================================================================
# Servicios externos (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    return Argon2PasswordHasher()


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    return JWTTokenService(get_settings().jwt_secret)


@lru_cache(maxsize=1)
def get_email_sender() -> EmailSender:
    settings = get_settings()
    if settings.email_backend == "console":
        return ConsoleEmailSender()
    return SmtpEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        timeout_seconds=settings.smtp_timeout_seconds,
        sender_email=settings.email_from,
        sender_name=settings.email_from_name,
    )


@lru_cache(maxsize=1)
def get_google_identity_verifier() -> GoogleIdentityVerifier:
    settings = get_settings()
    return GoogleTokenInfoVerifier(
        client_id=settings.google_client_id,
        timeout_seconds=settings.google_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_user_locks() -> KeyedLock:
    return KeyedLock()


# =============================================================================
# Servicios de recursos
# =============================================================================


@lru_cache(maxsize=1)
def get_client_service() -> ClientService:
    return ClientService(get_client_repository(), **_paging())


@lru_cache(maxsize=1)
def get_project_service() -> ProjectService:
    return ProjectService(get_project_repository(), get_client_repository(), **_paging())


@lru_cache(maxsize=1)
def get_task_service() -> TaskService:
    return TaskService(get_task_repository(), get_project_repository(), **_paging())


@lru_cache(maxsize=1)
def get_tag_service() -> TagService:
    return TagService(get_tag_repository(), **_paging())


@lru_cache(maxsize=1)
def get_timer_preset_service() -> TimerPresetService:
    return TimerPresetService(get_timer_preset_repository(), **_paging())


@lru_cache(maxsize=1)
def get_time_entry_service() -> TimeEntryService:
    return TimeEntryService(
        get_time_entry_repository(),
        projects=get_project_repository(),
        tasks=get_task_repository(),
        tags=get_tag_repository(),
        user_locks=get_user_locks(),
        **_paging(),
    )


# =============================================================================
# Casos de uso de cuenta
# =============================================================================


@lru_cache(maxsize=1)
def get_ensure_user_defaults_use_case() -> EnsureUserDefaultsUseCase:
    return EnsureUserDefaultsUseCase(
        get_user_repository(),
        get_project_repository(),
        get_timer_preset_repository(),
        max_attempts=get_settings().provisioning_max_attempts,
    )


@lru_cache(maxsize=1)
def get_session_issuer() -> SessionIssuer:
    return SessionIssuer(
        get_token_service(),
        lifetime=timedelta(days=get_settings().jwt_session_ttl_days),
    )


def get_register_user_use_case() -> RegisterUserUseCase:
    return RegisterUserUseCase(
        get_user_repository(),
        get_password_hasher(),
        get_ensure_user_defaults_use_case(),
        get_session_issuer(),
    )


def get_login_user_use_case() -> LoginUserUseCase:
    return LoginUserUseCase(
        get_user_repository(), get_password_hasher(), get_session_issuer()
    )


def get_google_login_use_case() -> GoogleLoginUseCase:
    return GoogleLoginUseCase(
        get_google_identity_verifier(),
        get_user_repository(),
        get_password_hasher(),
        get_ensure_user_defaults_use_case(),
        get_session_issuer(),
    )


def get_change_password_use_case() -> ChangePasswordUseCase:
    return ChangePasswordUseCase(get_user_repository(), get_password_hasher())


def get_forgot_password_use_case() -> ForgotPasswordUseCase:
    settings = get_settings()
    return ForgotPasswordUseCase(
        get_user_repository(),
        get_token_service(),
        get_email_sender(),
        frontend_url=settings.frontend_url,
        lifetime=timedelta(minutes=settings.password_reset_ttl_minutes),
    )


def get_reset_password_use_case() -> ResetPasswordUseCase:
    return ResetPasswordUseCase(
        get_user_repository(), get_password_hasher(), get_token_service()
    )


def get_request_verification_use_case() -> RequestVerificationUseCase:
    settings = get_settings()
    return RequestVerificationUseCase(
        get_user_repository(),
        get_token_service(),
        get_email_sender(),
        frontend_url=settings.frontend_url,
        lifetime=timedelta(hours=settings.email_verification_ttl_hours),
        cooldown=timedelta(seconds=settings.verification_cooldown_seconds),
    )


def get_verify_email_use_case() -> VerifyEmailUseCase:
    return VerifyEmailUseCase(get_user_repository(), get_token_service())


def get_verification_status_use_case() -> GetVerificationStatusUseCase:
    return GetVerificationStatusUseCase(get_user_repository())


def get_profile_use_case() -> GetProfileUseCase:
    return GetProfileUseCase(get_user_repository())


def get_update_profile_use_case() -> UpdateProfileUseCase:
    return UpdateProfileUseCase(get_user_repository(), get_timer_preset_repository())
