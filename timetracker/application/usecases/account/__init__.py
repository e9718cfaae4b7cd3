"""
Account Use Cases

Registro, login (password / Google), passwords, verificación de email y
perfil. Todos emiten o consumen tokens firmados con propósito.
"""

from .email_verification import (
    GetVerificationStatusUseCase,
    RequestVerificationUseCase,
    VerifyEmailUseCase,
)
from .google_login import GoogleLoginUseCase
from .inputs import (
    ChangePasswordInput,
    ForgotPasswordInput,
    GoogleLoginInput,
    LoginInput,
    RegisterInput,
    RequestVerificationInput,
    ResetPasswordInput,
    UpdateProfileInput,
    VerifyEmailInput,
)
from .login_user import LoginUserUseCase
from .passwords import ChangePasswordUseCase, ForgotPasswordUseCase, ResetPasswordUseCase
from .profile import GetProfileUseCase, UpdateProfileUseCase
from .register_user import RegisterUserUseCase
from .session import SessionIssuer

__all__ = [
    "ChangePasswordInput",
    "ChangePasswordUseCase",
    "ForgotPasswordInput",
    "ForgotPasswordUseCase",
    "GetProfileUseCase",
    "GetVerificationStatusUseCase",
    "GoogleLoginInput",
    "GoogleLoginUseCase",
    "LoginInput",
    "LoginUserUseCase",
    "RegisterInput",
    "RegisterUserUseCase",
    "RequestVerificationInput",
    "RequestVerificationUseCase",
    "ResetPasswordInput",
    "ResetPasswordUseCase",
    "SessionIssuer",
    "UpdateProfileInput",
    "UpdateProfileUseCase",
    "VerifyEmailInput",
    "VerifyEmailUseCase",
]
