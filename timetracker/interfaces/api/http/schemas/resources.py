"""
===============================================================================
TARJETA CRC — schemas/resources.py
===============================================================================

Módulo:
    Schemas HTTP de recursos con dueño

Responsabilidades:
    - DTO de salida por entidad (Client / Project / Task / Tag / TimerPreset /
      TimeEntry), construidos desde la dataclass de dominio.

Colaboradores:
    - domain.entities
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from .....domain.entities import ProjectStatus, TaskStatus


class _OwnedRes(BaseModel):
    # R: se construyen desde dataclasses de dominio (atributos, no dict).
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ClientRes(_OwnedRes):
    name: str
    contact_info: str
    color: str


class ProjectRes(_OwnedRes):
    name: str
    description: str
    color: str
    status: ProjectStatus
    client_id: UUID | None = None


class TaskRes(_OwnedRes):
    name: str
    project_id: UUID
    description: str
    status: TaskStatus


class TagRes(_OwnedRes):
    name: str
    color: str


class TimerPresetRes(_OwnedRes):
    name: str
    work_duration: int
    break_duration: int
    repetitions: int


class TimeEntryRes(_OwnedRes):
    project_id: UUID
    task_id: UUID | None = None
    tag_ids: List[UUID]
    start_time: datetime
    end_time: datetime | None = None
    duration: int
    notes: str
    is_running: bool
