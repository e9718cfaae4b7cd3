"""
===============================================================================
ACCOUNT INPUTS
===============================================================================

Responsibilities:
    - Definir los inputs del ciclo de vida de cuentas (registro, login,
      passwords, verificación, perfil, Google).
    - Normalizar emails (trim + lower) y validar su forma.
    - Fijar el mínimo de password (6 caracteres).
===============================================================================
"""

from __future__ import annotations

import re
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from ....identity.users import Language, Theme
from ..resources.inputs import NAME_MAX_CHARS, InputModel, normalize_name

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PASSWORD_MIN_CHARS = 6
PASSWORD_MAX_CHARS = 512
EMAIL_MAX_CHARS = 320

_EMAIL = re.compile(EMAIL_PATTERN)


def normalize_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip().lower()
    if not _EMAIL.match(cleaned):
        raise ValueError("Invalid email format")
    return cleaned


class _EmailInput(InputModel):
    @field_validator("email", check_fields=False)
    @classmethod
    def _validate_email(cls, v):
        return normalize_email(v)


class RegisterInput(_EmailInput):
    name: str = Field(..., max_length=NAME_MAX_CHARS)
    email: str = Field(..., max_length=EMAIL_MAX_CHARS)
    password: str = Field(
        ..., min_length=PASSWORD_MIN_CHARS, max_length=PASSWORD_MAX_CHARS
    )
    preferred_language: Language = Language.EN
    theme: Theme = Theme.LIGHT

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v):
        return normalize_name(v)


class LoginInput(InputModel):
    # R: sin validar formato: un email mal formado es "credenciales inválidas".
    email: str = Field(..., max_length=EMAIL_MAX_CHARS)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_CHARS)

    @field_validator("email")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.lower()


class ChangePasswordInput(InputModel):
    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_CHARS)
    new_password: str = Field(
        ..., min_length=PASSWORD_MIN_CHARS, max_length=PASSWORD_MAX_CHARS
    )


class ForgotPasswordInput(_EmailInput):
    email: str = Field(..., max_length=EMAIL_MAX_CHARS)


class ResetPasswordInput(InputModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(
        ..., min_length=PASSWORD_MIN_CHARS, max_length=PASSWORD_MAX_CHARS
    )


class RequestVerificationInput(_EmailInput):
    email: str = Field(..., max_length=EMAIL_MAX_CHARS)


class VerifyEmailInput(InputModel):
    token: str = Field(..., min_length=1)


class UpdateProfileInput(_EmailInput):
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_CHARS)
    email: Optional[str] = Field(default=None, max_length=EMAIL_MAX_CHARS)
    preferred_language: Optional[Language] = None
    theme: Optional[Theme] = None
    picture: Optional[str] = Field(default=None, max_length=2_048)
    default_timer_preset_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v):
        return normalize_name(v)


class GoogleLoginInput(InputModel):
    id_token: str = Field(..., min_length=1)
