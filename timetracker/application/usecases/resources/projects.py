"""
===============================================================================
USE CASE: Project Service
===============================================================================

Class:
    ProjectService

Business Goal:
    CRUD owner-scoped de Projects. Un proyecto puede apuntar a un Client,
    que debe ser del mismo dueño.

Responsibilities:
    - Defaults: color #3498db, status active.
    - Validar client_id (existe + mismo dueño) en create/update.
    - client_id acepta null explícito en update (desasociar cliente).
    - list_by_client: proyectos del caller para un cliente.

Collaborators:
    - OwnedResourceRepository[Project]
    - OwnedResourceRepository[Client] (validación de referencia)
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping, Optional
from uuid import UUID

from ....domain.entities import Client, Project
from ....domain.repositories import OwnedResourceRepository
from ..results import ResourceListResult, ServiceError
from .inputs import CreateProjectInput, UpdateProjectInput
from .owned_resource_service import OwnedResourceService


class ProjectService(OwnedResourceService[Project]):
    resource_name = "Project"
    entity_cls = Project
    create_input = CreateProjectInput
    update_input = UpdateProjectInput
    clearable_fields = frozenset({"client_id"})

    def __init__(
        self,
        repository: OwnedResourceRepository[Project],
        clients: OwnedResourceRepository[Client],
        **kwargs: Any,
    ) -> None:
        super().__init__(repository, **kwargs)
        self._clients = clients

    def list_by_client(
        self,
        caller_id: UUID,
        client_id: UUID,
        page: int | None = None,
        limit: int | None = None,
    ) -> ResourceListResult[Project]:
        return self._list_where(
            {"user_id": caller_id, "client_id": client_id}, page, limit
        )

    def _check_references(
        self, caller_id: UUID, fields: Mapping[str, Any]
    ) -> Optional[ServiceError]:
        return self._owned_reference(
            self._clients,
            fields.get("client_id"),
            caller_id,
            field="client_id",
            resource="Client",
        )
