"""
===============================================================================
USE CASE: Time Entry Engine
===============================================================================

Name:
    TimeEntryService

Business Goal:
    Gobernar la máquina de estados de los timers (Running / Stopped), derivar
    la duración de cada registro y exponer las consultas de tiempo
    (por proyecto, por tarea, por rango de fechas).

Why (Context / Intención):
    - Un usuario tiene como máximo UN timer corriendo. Arrancar otro detiene
      el anterior en el start_time del nuevo ("stop-and-replace").
    - La secuencia buscar-detener-crear no es atómica en el store: se
      serializa con un lock por usuario (KeyedLock). Entre procesos, el
      índice único parcial de time_entries es el respaldo.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    TimeEntryService

Responsibilities:
    - create / update con regla de duración:
        1) duration explícita gana
        2) si hay start_time y end_time: end_time - start_time (ms, sin clamp)
        3) update: conserva la duración previa; create: 0
    - start (Running desde ahora) / stop (Running -> Stopped).
    - Stop-and-replace bajo lock por usuario.
    - Validar referencias (project, task, tags) del mismo dueño.
    - Consultas owner-scoped paginadas + conteos.

Collaborators:
    - domain.repositories.TimeEntryRepository
    - OwnedResourceRepository[Project | Task | Tag] (referencias)
    - crosscutting.locks.KeyedLock
    - crosscutting.metrics (transiciones started / stopped / replaced)
    - OwnedResourceService (guard de propiedad, paginación, merge)

-------------------------------------------------------------------------------
Error Mapping:
    - BAD_REQUEST: input inválido, referencia ajena, rango inválido,
      entrada que no está corriendo (stop)
    - NOT_FOUND: entrada inexistente o ajena
    - INTERNAL_ERROR: el store no devolvió registro tras una mutación
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional
from uuid import UUID

from ....crosscutting.locks import KeyedLock
from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_timer_transition
from ....domain.entities import Project, Tag, Task, TimeEntry, elapsed_ms, utcnow
from ....domain.repositories import OwnedResourceRepository, TimeEntryRepository
from ..resources.owned_resource_service import InputPayload, OwnedResourceService
from ..results import (
    CountResult,
    ResourceListResult,
    ResourceResult,
    ServiceError,
    bad_request,
    not_found,
)
from ..validation import validate_input
from .inputs import (
    CreateTimeEntryInput,
    StartTimeEntryInput,
    UpdateTimeEntryInput,
    as_utc,
)

RESOURCE = "TimeEntry"


class TimeEntryService(OwnedResourceService[TimeEntry]):
    resource_name = RESOURCE
    entity_cls = TimeEntry
    create_input = CreateTimeEntryInput
    update_input = UpdateTimeEntryInput
    clearable_fields = frozenset({"task_id"})

    def __init__(
        self,
        repository: TimeEntryRepository,
        *,
        projects: OwnedResourceRepository[Project],
        tasks: OwnedResourceRepository[Task],
        tags: OwnedResourceRepository[Tag],
        user_locks: KeyedLock | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(repository, **kwargs)
        self._entries: TimeEntryRepository = repository
        self._projects = projects
        self._tasks = tasks
        self._tags = tags
        self._user_locks = user_locks or KeyedLock()

    # =========================================================================
    # Commands
    # =========================================================================
    def create(self, caller_id: UUID, data: InputPayload) -> ResourceResult[TimeEntry]:
        # ---------------------------------------------------------------------
        # 1) Validar input + referencias.
        # ---------------------------------------------------------------------
        error, payload = validate_input(CreateTimeEntryInput, data)
        if error is not None:
            return ResourceResult(error=bad_request(error, RESOURCE))

        fields = payload.model_dump()
        ref_error = self._check_references(caller_id, fields)
        if ref_error is not None:
            return ResourceResult(error=ref_error)

        if fields["is_running"] and fields["end_time"] is not None:
            return ResourceResult(
                error=bad_request(
                    "end_time: a running entry cannot have an end time", RESOURCE
                )
            )

        # ---------------------------------------------------------------------
        # 2) Regla de duración (create: fallback 0).
        # ---------------------------------------------------------------------
        fields["duration"] = derive_duration(
            explicit=fields["duration"],
            start=fields["start_time"],
            end=fields["end_time"],
            previous=0,
        )

        # ---------------------------------------------------------------------
        # 3) Persistir (Running => stop-and-replace bajo lock).
        # ---------------------------------------------------------------------
        if not fields["is_running"]:
            return self._insert(caller_id, fields)

        with self._user_locks.hold(caller_id):
            stop_error = self._stop_previous(caller_id, fields["start_time"])
            if stop_error is not None:
                return ResourceResult(error=stop_error)
            return self._insert(caller_id, fields)

    def start(self, caller_id: UUID, data: InputPayload) -> ResourceResult[TimeEntry]:
        """Arranca un timer Running con start_time = ahora."""
        error, payload = validate_input(StartTimeEntryInput, data)
        if error is not None:
            return ResourceResult(error=bad_request(error, RESOURCE))

        return self.create(
            caller_id,
            {
                **payload.model_dump(),
                "start_time": utcnow(),
                "end_time": None,
                "duration": 0,
                "is_running": True,
            },
        )

    def update(
        self, caller_id: UUID, entity_id: UUID, data: InputPayload
    ) -> ResourceResult[TimeEntry]:
        # ---------------------------------------------------------------------
        # 1) Validar input parcial + guard de propiedad.
        # ---------------------------------------------------------------------
        error, payload = validate_input(UpdateTimeEntryInput, data)
        if error is not None:
            return ResourceResult(error=bad_request(error, RESOURCE))

        current = self._load_owned(caller_id, entity_id)
        if current is None:
            return ResourceResult(error=not_found(RESOURCE))

        changes = self._changes_from(payload)
        ref_error = self._check_references(caller_id, changes)
        if ref_error is not None:
            return ResourceResult(error=ref_error)

        if not changes:
            return ResourceResult(item=current)

        # ---------------------------------------------------------------------
        # 2) Transiciones de estado.
        #    - end_time sin is_running => la entrada queda Stopped
        #    - is_running=False sobre una Running sin end_time => end_time = ahora
        #    - is_running=True => end_time se limpia
        # ---------------------------------------------------------------------
        if "end_time" in changes and "is_running" not in changes:
            changes["is_running"] = False
        if changes.get("is_running") is False and "end_time" not in changes:
            if current.is_running:
                changes["end_time"] = utcnow()
        if changes.get("is_running"):
            if "end_time" in changes:
                return ResourceResult(
                    error=bad_request(
                        "end_time: a running entry cannot have an end time", RESOURCE
                    )
                )
            changes["end_time"] = None

        # ---------------------------------------------------------------------
        # 3) Regla de duración (update: fallback a la duración previa).
        # ---------------------------------------------------------------------
        if "tag_ids" in changes:
            changes["tag_ids"] = tuple(changes["tag_ids"])

        start = changes.get("start_time", current.start_time)
        end = changes.get("end_time", current.end_time)
        boundary_changed = "start_time" in changes or "end_time" in changes
        changes["duration"] = derive_duration(
            explicit=changes.get("duration"),
            start=start if boundary_changed else None,
            end=end if boundary_changed else None,
            previous=current.duration,
        )

        # ---------------------------------------------------------------------
        # 4) Persistir (pasar a Running => stop-and-replace bajo lock).
        # ---------------------------------------------------------------------
        if not changes.get("is_running") or current.is_running:
            return self._apply_update(entity_id, changes)

        with self._user_locks.hold(caller_id):
            stop_error = self._stop_previous(caller_id, start, keep_id=entity_id)
            if stop_error is not None:
                return ResourceResult(error=stop_error)
            return self._apply_update(entity_id, changes)

    def stop(self, caller_id: UUID, entity_id: UUID) -> ResourceResult[TimeEntry]:
        """Running -> Stopped: end_time = ahora, duración recalculada."""
        with self._user_locks.hold(caller_id):
            current = self._load_owned(caller_id, entity_id)
            if current is None:
                return ResourceResult(error=not_found(RESOURCE))
            if not current.is_running:
                return ResourceResult(
                    error=bad_request("Time entry is not running", RESOURCE)
                )

            now = utcnow()
            result = self._apply_update(
                entity_id,
                {
                    "end_time": now,
                    "is_running": False,
                    "duration": elapsed_ms(current.start_time, now),
                },
            )

        if result.item is not None:
            record_timer_transition("stopped")
            logger.info(
                "Timer detenido",
                extra={"time_entry_id": str(entity_id), "duration": result.item.duration},
            )
        return result

    # =========================================================================
    # Queries
    # =========================================================================
    def find_running(self, caller_id: UUID) -> ResourceResult[TimeEntry]:
        """Timer corriendo del caller (item=None si no hay)."""
        return ResourceResult(item=self._entries.find_running_by_user(caller_id))

    def list_by_project(
        self,
        caller_id: UUID,
        project_id: UUID,
        page: int | None = None,
        limit: int | None = None,
    ) -> ResourceListResult[TimeEntry]:
        return self._list_where(
            {"user_id": caller_id, "project_id": project_id}, page, limit
        )

    def list_by_task(
        self,
        caller_id: UUID,
        task_id: UUID,
        page: int | None = None,
        limit: int | None = None,
    ) -> ResourceListResult[TimeEntry]:
        return self._list_where({"user_id": caller_id, "task_id": task_id}, page, limit)

    def list_by_date_range(
        self,
        caller_id: UUID,
        start: datetime,
        end: datetime,
        page: int | None = None,
        limit: int | None = None,
    ) -> ResourceListResult[TimeEntry]:
        """Entradas con start <= start_time <= end, más reciente primero."""
        start, end = as_utc(start), as_utc(end)
        if start > end:
            return ResourceListResult(
                error=bad_request("start: must not be after end", RESOURCE)
            )

        error, page_request = self._resolve_page(page, limit)
        if error is not None:
            return ResourceListResult(error=bad_request(error, RESOURCE))

        return ResourceListResult(
            items=self._entries.list_by_date_range(
                caller_id,
                start,
                end,
                offset=page_request.offset,
                limit=page_request.limit,
            )
        )

    def count_by_project(self, caller_id: UUID, project_id: UUID) -> CountResult:
        return CountResult(
            count=self._entries.count(
                filters={"user_id": caller_id, "project_id": project_id}
            )
        )

    def count_by_task(self, caller_id: UUID, task_id: UUID) -> CountResult:
        return CountResult(
            count=self._entries.count(filters={"user_id": caller_id, "task_id": task_id})
        )

    # R: alias explícito; count() ya está scopeado por user_id.
    count_by_user = OwnedResourceService.count

    # =========================================================================
    # Internals
    # =========================================================================
    def _check_references(
        self, caller_id: UUID, fields: Mapping[str, Any]
    ) -> Optional[ServiceError]:
        error = self._owned_reference(
            self._projects,
            fields.get("project_id"),
            caller_id,
            field="project_id",
            resource="Project",
        ) or self._owned_reference(
            self._tasks,
            fields.get("task_id"),
            caller_id,
            field="task_id",
            resource="Task",
        )
        if error is not None:
            return error

        for tag_id in fields.get("tag_ids") or ():
            error = self._owned_reference(
                self._tags, tag_id, caller_id, field="tag_ids", resource="Tag"
            )
            if error is not None:
                return error
        return None

    def _build(self, caller_id: UUID, fields: Dict[str, Any]) -> TimeEntry:
        return super()._build(
            caller_id, {**fields, "tag_ids": tuple(fields.get("tag_ids") or ())}
        )

    def _insert(self, caller_id: UUID, fields: Dict[str, Any]) -> ResourceResult[TimeEntry]:
        created = self._repository.create(self._build(caller_id, fields))
        if created is None:
            return self._persistence_fault("create")

        if created.is_running:
            record_timer_transition("started")
        logger.info(
            "Time entry creada",
            extra={
                "time_entry_id": str(created.id),
                "is_running": created.is_running,
                "duration": created.duration,
            },
        )
        return ResourceResult(item=created)

    def _stop_previous(
        self, caller_id: UUID, stop_at: datetime, *, keep_id: UUID | None = None
    ) -> Optional[ServiceError]:
        """
        Detiene el timer corriendo del caller en `stop_at`.

        Precondición: el lock del caller está tomado.
        """
        running = self._entries.find_running_by_user(caller_id)
        if running is None or running.id == keep_id:
            return None

        # R: nunca cerrar antes de su propio inicio (duración >= 0).
        end = max(stop_at, running.start_time)
        stopped = self._apply_update(
            running.id,
            {
                "end_time": end,
                "is_running": False,
                "duration": elapsed_ms(running.start_time, end),
            },
        )
        if stopped.error is not None:
            return stopped.error

        record_timer_transition("replaced")
        logger.info(
            "Timer reemplazado",
            extra={"time_entry_id": str(running.id), "stopped_at": end.isoformat()},
        )
        return None


def derive_duration(
    *,
    explicit: Optional[int],
    start: Optional[datetime],
    end: Optional[datetime],
    previous: int,
) -> int:
    """
    Regla de duración (ms).

    explicit > (end - start) > previous. No recorta rangos invertidos.
    """
    if explicit is not None:
        return explicit
    if start is not None and end is not None:
        return elapsed_ms(start, end)
    return previous
