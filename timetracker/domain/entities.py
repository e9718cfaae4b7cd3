"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Client, Project, Task, Tag, TimerPreset, TimeEntry)

Responsabilidades:
    - Definir las estructuras centrales del negocio (sin infraestructura).
    - Fijar defaults de dominio (colores, estados) en un único lugar.
    - Brindar helpers mínimos para invariantes simples (duración en vivo).

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - domain.ownership_policy: decide acceso por user_id.
    - application/usecases: construyen/consumen estas entidades.

Principios:
    - Sin dependencias a DB/FastAPI.
    - Inmutables (frozen): toda mutación pasa por el repositorio
      (dataclasses.replace), así nadie comparte una instancia "viva".
    - Toda entidad lleva user_id (dueño). El dueño nunca se reasigna.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Tuple
from uuid import UUID

# ---------------------------------------------------------------------------
# Defaults de dominio
# ---------------------------------------------------------------------------
CLIENT_DEFAULT_COLOR = "#e74c3c"
PROJECT_DEFAULT_COLOR = "#3498db"
TAG_DEFAULT_COLOR = "#2ecc71"
TIMER_PRESET_DEFAULT_REPETITIONS = 1

HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"

_ONE_MS = timedelta(milliseconds=1)


def utcnow() -> datetime:
    """Fuente única de tiempo (UTC)."""
    return datetime.now(timezone.utc)


def elapsed_ms(start: datetime, end: datetime) -> int:
    """
    Milisegundos entre start y end.

    No se recorta a >= 0: un rango invertido da una duración negativa.
    """
    return (end - start) // _ONE_MS


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# ---------------------------------------------------------------------------
# Recursos de catálogo
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Client:
    """Cliente para el que se trabaja (agrupa proyectos)."""

    id: UUID
    user_id: UUID
    name: str
    contact_info: str = ""
    color: str = CLIENT_DEFAULT_COLOR
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Project:
    """Proyecto; opcionalmente asociado a un Client del mismo dueño."""

    id: UUID
    user_id: UUID
    name: str
    description: str = ""
    color: str = PROJECT_DEFAULT_COLOR
    status: ProjectStatus = ProjectStatus.ACTIVE
    client_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Task:
    """Tarea dentro de un Project (referencia obligatoria)."""

    id: UUID
    user_id: UUID
    name: str
    project_id: UUID
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Tag:
    id: UUID
    user_id: UUID
    name: str
    color: str = TAG_DEFAULT_COLOR
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class TimerPreset:
    """Ciclo de trabajo/descanso (minutos) repetido N veces."""

    id: UUID
    user_id: UUID
    name: str
    work_duration: int
    break_duration: int
    repetitions: int = TIMER_PRESET_DEFAULT_REPETITIONS
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# TimeEntry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeEntry:
    """
    Registro de tiempo.

    Estados:
      - Running: is_running=True, end_time=None, duration congelada (típicamente 0)
      - Stopped: is_running=False, end_time seteado, duration definitiva

    duration está en milisegundos.
    """

    id: UUID
    user_id: UUID
    project_id: UUID
    start_time: datetime
    task_id: Optional[UUID] = None
    tag_ids: Tuple[UUID, ...] = ()
    end_time: Optional[datetime] = None
    duration: int = 0
    notes: str = ""
    is_running: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def live_duration(self, *, now: datetime | None = None) -> int:
        """
        Duración "en vivo".

        Mientras corre, duration no se actualiza: se calcula now - start_time.
        """
        if self.is_running:
            return elapsed_ms(self.start_time, now or utcnow())
        return self.duration
