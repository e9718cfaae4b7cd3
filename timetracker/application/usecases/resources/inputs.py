"""
===============================================================================
RESOURCE INPUTS (Create / Update DTOs validados)
===============================================================================

Responsibilities:
    - Definir los inputs de Client / Project / Task / Tag / TimerPreset.
    - Rechazar: nombres vacíos, colores no-hex, números fuera de rango,
      referencias que no tienen forma de id (UUID).
    - Aplicar defaults de creación (colores, estados, repeticiones).

Collaborators:
    - domain.entities (defaults y enums)
    - application.usecases.validation.validate_input
    - interfaces/api/http (los mismos modelos son body de FastAPI)

Notas:
    - Los Update* tienen todos los campos opcionales: el servicio mergea solo
      los campos enviados (exclude_unset).
===============================================================================
"""

from __future__ import annotations

import re
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ....domain.entities import (
    CLIENT_DEFAULT_COLOR,
    HEX_COLOR_PATTERN,
    PROJECT_DEFAULT_COLOR,
    TAG_DEFAULT_COLOR,
    TIMER_PRESET_DEFAULT_REPETITIONS,
    ProjectStatus,
    TaskStatus,
)

_HEX_COLOR = re.compile(HEX_COLOR_PATTERN)

NAME_MAX_CHARS = 200
TEXT_MAX_CHARS = 2_000


def normalize_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("Name is required")
    return cleaned


def check_color(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not _HEX_COLOR.match(value):
        raise ValueError("Invalid color format (should be hex)")
    return value


class InputModel(BaseModel):
    """Base común: strings recortados, campos desconocidos ignorados."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class _NamedInput(InputModel):
    @field_validator("name", check_fields=False)
    @classmethod
    def _validate_name(cls, v):
        return normalize_name(v)


class _ColoredInput(_NamedInput):
    @field_validator("color", check_fields=False)
    @classmethod
    def _validate_color(cls, v):
        return check_color(v)


# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------
class CreateClientInput(_ColoredInput):
    name: str = Field(..., max_length=NAME_MAX_CHARS)
    contact_info: str = Field(default="", max_length=TEXT_MAX_CHARS)
    color: str = CLIENT_DEFAULT_COLOR


class UpdateClientInput(_ColoredInput):
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_CHARS)
    contact_info: Optional[str] = Field(default=None, max_length=TEXT_MAX_CHARS)
    color: Optional[str] = None


# -----------------------------------------------------------------------------
# Project
# -----------------------------------------------------------------------------
class CreateProjectInput(_ColoredInput):
    name: str = Field(..., max_length=NAME_MAX_CHARS)
    description: str = Field(default="", max_length=TEXT_MAX_CHARS)
    color: str = PROJECT_DEFAULT_COLOR
    status: ProjectStatus = ProjectStatus.ACTIVE
    client_id: Optional[UUID] = None


class UpdateProjectInput(_ColoredInput):
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_CHARS)
    description: Optional[str] = Field(default=None, max_length=TEXT_MAX_CHARS)
    color: Optional[str] = None
    status: Optional[ProjectStatus] = None
    client_id: Optional[UUID] = None


# -----------------------------------------------------------------------------
# Task
# -----------------------------------------------------------------------------
class CreateTaskInput(_NamedInput):
    name: str = Field(..., max_length=NAME_MAX_CHARS)
    project_id: UUID
    description: str = Field(default="", max_length=TEXT_MAX_CHARS)
    status: TaskStatus = TaskStatus.PENDING


class UpdateTaskInput(_NamedInput):
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_CHARS)
    project_id: Optional[UUID] = None
    description: Optional[str] = Field(default=None, max_length=TEXT_MAX_CHARS)
    status: Optional[TaskStatus] = None


# -----------------------------------------------------------------------------
# Tag
# -----------------------------------------------------------------------------
class CreateTagInput(_ColoredInput):
    name: str = Field(..., max_length=NAME_MAX_CHARS)
    color: str = TAG_DEFAULT_COLOR


class UpdateTagInput(_ColoredInput):
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_CHARS)
    color: Optional[str] = None


# -----------------------------------------------------------------------------
# TimerPreset (duraciones en minutos)
# -----------------------------------------------------------------------------
class CreateTimerPresetInput(_NamedInput):
    name: str = Field(..., max_length=NAME_MAX_CHARS)
    work_duration: int = Field(..., ge=1)
    break_duration: int = Field(..., ge=1)
    repetitions: int = Field(default=TIMER_PRESET_DEFAULT_REPETITIONS, ge=1)


class UpdateTimerPresetInput(_NamedInput):
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_CHARS)
    work_duration: Optional[int] = Field(default=None, ge=1)
    break_duration: Optional[int] = Field(default=None, ge=1)
    repetitions: Optional[int] = Field(default=None, ge=1)
