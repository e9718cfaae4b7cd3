"""
===============================================================================
USE CASE: Task Service
===============================================================================

Class:
    TaskService

Business Goal:
    CRUD owner-scoped de Tasks. Toda tarea pertenece a un Project del mismo
    dueño.

Responsibilities:
    - Default: status pending.
    - Validar project_id (existe + mismo dueño) en create/update.
    - list_by_project / count_by_project: NO scopeados por dueño. Cualquier
      caller con un project_id válido puede consultar (conteos compartibles).

Collaborators:
    - OwnedResourceRepository[Task]
    - OwnedResourceRepository[Project] (validación de referencia)
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping, Optional
from uuid import UUID

from ....domain.entities import Project, Task
from ....domain.repositories import OwnedResourceRepository
from ..results import CountResult, ResourceListResult, ServiceError
from .inputs import CreateTaskInput, UpdateTaskInput
from .owned_resource_service import OwnedResourceService


class TaskService(OwnedResourceService[Task]):
    resource_name = "Task"
    entity_cls = Task
    create_input = CreateTaskInput
    update_input = UpdateTaskInput

    def __init__(
        self,
        repository: OwnedResourceRepository[Task],
        projects: OwnedResourceRepository[Project],
        **kwargs: Any,
    ) -> None:
        super().__init__(repository, **kwargs)
        self._projects = projects

    def list_by_project(
        self,
        project_id: UUID,
        page: int | None = None,
        limit: int | None = None,
    ) -> ResourceListResult[Task]:
        return self._list_where({"project_id": project_id}, page, limit)

    def count_by_project(self, project_id: UUID) -> CountResult:
        return CountResult(
            count=self._repository.count(filters={"project_id": project_id})
        )

    def _check_references(
        self, caller_id: UUID, fields: Mapping[str, Any]
    ) -> Optional[ServiceError]:
        return self._owned_reference(
            self._projects,
            fields.get("project_id"),
            caller_id,
            field="project_id",
            resource="Project",
        )
