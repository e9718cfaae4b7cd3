"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/time_entries.py
===============================================================================

Class/Module:
    Time Entry Router

Responsibilities:
    - Exponer CRUD de time entries + comandos de timer (start / stop).
    - Exponer consultas: timer corriendo, por proyecto, por tarea, por rango
      de fechas y conteos.
    - Traducir ServiceError -> RFC7807.

Collaborators:
    - application.usecases.time_entries.TimeEntryService
    - container.get_time_entry_service
    - dependencies.require_user / page_params
    - schemas.resources.TimeEntryRes

Notas:
    - Las rutas literales (/count, /running, /start, /by-*) se registran
      antes de /{entry_id}.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from .....application.usecases.time_entries import (
    CreateTimeEntryInput,
    StartTimeEntryInput,
    TimeEntryService,
    UpdateTimeEntryInput,
)
from .....container import get_time_entry_service
from .....identity.users import User
from ..dependencies import PageParams, page_params, require_user
from ..error_mapping import unwrap
from ..schemas.common import CountRes, DeleteRes
from ..schemas.resources import TimeEntryRes

router = APIRouter(prefix="/time-entries", tags=["time-entries"])


def _to_list(result) -> list[TimeEntryRes]:
    return [TimeEntryRes.model_validate(item) for item in unwrap(result).items]


# =============================================================================
# Colección
# =============================================================================


@router.get("", response_model=List[TimeEntryRes])
def list_time_entries(
    paging: PageParams = Depends(page_params),
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return _to_list(service.list(user.id, paging.page, paging.limit))


@router.post("", response_model=TimeEntryRes, status_code=201)
def create_time_entry(
    data: CreateTimeEntryInput,
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    """
    Crea una entrada.

    Si llega con is_running=true y el usuario ya tenía un timer corriendo,
    el anterior se detiene en el start_time de la nueva.
    """
    return TimeEntryRes.model_validate(unwrap(service.create(user.id, data)).item)


@router.get("/count", response_model=CountRes)
def count_time_entries(
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return CountRes(count=unwrap(service.count_by_user(user.id)).count)


@router.get("/running", response_model=Optional[TimeEntryRes])
def get_running_time_entry(
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    item = unwrap(service.find_running(user.id)).item
    return TimeEntryRes.model_validate(item) if item else None


@router.post("/start", response_model=TimeEntryRes, status_code=201)
def start_timer(
    data: StartTimeEntryInput,
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return TimeEntryRes.model_validate(unwrap(service.start(user.id, data)).item)


# =============================================================================
# Consultas filtradas
# =============================================================================


@router.get("/by-project/{project_id}", response_model=List[TimeEntryRes])
def list_time_entries_by_project(
    project_id: UUID,
    paging: PageParams = Depends(page_params),
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return _to_list(
        service.list_by_project(user.id, project_id, paging.page, paging.limit)
    )


@router.get("/by-project/{project_id}/count", response_model=CountRes)
def count_time_entries_by_project(
    project_id: UUID,
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return CountRes(count=unwrap(service.count_by_project(user.id, project_id)).count)


@router.get("/by-task/{task_id}", response_model=List[TimeEntryRes])
def list_time_entries_by_task(
    task_id: UUID,
    paging: PageParams = Depends(page_params),
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return _to_list(service.list_by_task(user.id, task_id, paging.page, paging.limit))


@router.get("/by-task/{task_id}/count", response_model=CountRes)
def count_time_entries_by_task(
    task_id: UUID,
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return CountRes(count=unwrap(service.count_by_task(user.id, task_id)).count)


@router.get("/by-date-range", response_model=List[TimeEntryRes])
def list_time_entries_by_date_range(
    start: datetime = Query(...),
    end: datetime = Query(...),
    paging: PageParams = Depends(page_params),
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return _to_list(
        service.list_by_date_range(user.id, start, end, paging.page, paging.limit)
    )


# =============================================================================
# Entrada puntual
# =============================================================================


@router.get("/{entry_id}", response_model=TimeEntryRes)
def get_time_entry(
    entry_id: UUID,
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return TimeEntryRes.model_validate(unwrap(service.get(user.id, entry_id)).item)


@router.patch("/{entry_id}", response_model=TimeEntryRes)
def update_time_entry(
    entry_id: UUID,
    data: UpdateTimeEntryInput,
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    result = unwrap(service.update(user.id, entry_id, data))
    return TimeEntryRes.model_validate(result.item)


@router.post("/{entry_id}/stop", response_model=TimeEntryRes)
def stop_timer(
    entry_id: UUID,
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return TimeEntryRes.model_validate(unwrap(service.stop(user.id, entry_id)).item)


@router.delete("/{entry_id}", response_model=DeleteRes)
def delete_time_entry(
    entry_id: UUID,
    service: TimeEntryService = Depends(get_time_entry_service),
    user: User = Depends(require_user),
):
    return DeleteRes(deleted=unwrap(service.delete(user.id, entry_id)).deleted)
