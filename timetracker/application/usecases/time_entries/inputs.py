"""
===============================================================================
TIME ENTRY INPUTS
===============================================================================

Responsibilities:
    - Definir inputs de create / update / start de TimeEntry.
    - Normalizar fechas a UTC (un datetime naive se interpreta como UTC).
    - Rechazar ids mal formados, duración explícita negativa y notas largas.

Notas:
    - duration (ms) es opcional: si se envía, gana sobre el cálculo
      end_time - start_time (ver TimeEntryService).
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from ..resources.inputs import TEXT_MAX_CHARS, InputModel


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _TimeBoundsInput(InputModel):
    @field_validator("start_time", "end_time", check_fields=False)
    @classmethod
    def _normalize_time(cls, v):
        return as_utc(v)


class CreateTimeEntryInput(_TimeBoundsInput):
    project_id: UUID
    task_id: Optional[UUID] = None
    tag_ids: List[UUID] = Field(default_factory=list)
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, ge=0)
    notes: str = Field(default="", max_length=TEXT_MAX_CHARS)
    is_running: bool = False


class UpdateTimeEntryInput(_TimeBoundsInput):
    project_id: Optional[UUID] = None
    task_id: Optional[UUID] = None
    tag_ids: Optional[List[UUID]] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = Field(default=None, max_length=TEXT_MAX_CHARS)
    is_running: Optional[bool] = None


class StartTimeEntryInput(InputModel):
    """Timer que arranca "ahora" (start_time lo fija el servidor)."""

    project_id: UUID
    task_id: Optional[UUID] = None
    tag_ids: List[UUID] = Field(default_factory=list)
    notes: str = Field(default="", max_length=TEXT_MAX_CHARS)
