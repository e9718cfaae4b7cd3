"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/resources.py
===============================================================================

Class/Module:
    Routers de recursos con dueño (clients / projects / tasks / tags /
    timer-presets)

Responsibilities:
    - Exponer el mismo CRUD HTTP para las cinco entidades desde UNA factory
      (build_resource_router), igual que OwnedResourceService lo hace en
      application.
    - Exponer consultas extra: proyectos por cliente, tareas por proyecto.
    - Traducir ServiceError -> RFC7807 (error_mapping).

Collaborators:
    - container (factories de servicios)
    - dependencies.require_user / page_params
    - application.usecases.resources (inputs + servicios)
    - schemas.resources / schemas.common

Notas:
    - Este módulo NO usa `from __future__ import annotations`: los endpoints
      se definen dentro de la factory y FastAPI necesita los tipos de body
      (create_input / update_input) ya evaluados.
===============================================================================
"""

from typing import Any, Callable, List, Type
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from .....application.usecases.resources import (
    CreateClientInput,
    CreateProjectInput,
    CreateTagInput,
    CreateTaskInput,
    CreateTimerPresetInput,
    OwnedResourceService,
    ProjectService,
    TaskService,
    UpdateClientInput,
    UpdateProjectInput,
    UpdateTagInput,
    UpdateTaskInput,
    UpdateTimerPresetInput,
)
from .....container import (
    get_client_service,
    get_project_service,
    get_tag_service,
    get_task_service,
    get_timer_preset_service,
)
from .....identity.users import User
from ..dependencies import PageParams, page_params, require_user
from ..error_mapping import unwrap
from ..schemas.common import CountRes, DeleteRes
from ..schemas.resources import (
    ClientRes,
    ProjectRes,
    TagRes,
    TaskRes,
    TimerPresetRes,
)


def build_resource_router(
    *,
    prefix: str,
    tag: str,
    get_service: Callable[[], OwnedResourceService[Any]],
    create_input: Type[BaseModel],
    update_input: Type[BaseModel],
    response_model: Type[BaseModel],
) -> APIRouter:
    """
    Construye el CRUD HTTP de un recurso con dueño.

    Rutas:
      GET    {prefix}            (page, limit)
      POST   {prefix}
      GET    {prefix}/count
      GET    {prefix}/{id}
      PATCH  {prefix}/{id}
      DELETE {prefix}/{id}
    """
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("", response_model=List[response_model])
    def list_resources(
        paging: PageParams = Depends(page_params),
        service: OwnedResourceService = Depends(get_service),
        user: User = Depends(require_user),
    ):
        result = unwrap(service.list(user.id, paging.page, paging.limit))
        return [response_model.model_validate(item) for item in result.items]

    @router.post("", response_model=response_model, status_code=201)
    def create_resource(
        data: create_input,
        service: OwnedResourceService = Depends(get_service),
        user: User = Depends(require_user),
    ):
        result = unwrap(service.create(user.id, data))
        return response_model.model_validate(result.item)

    # R: declarado antes de /{entity_id} para que "count" no se lea como id.
    @router.get("/count", response_model=CountRes)
    def count_resources(
        service: OwnedResourceService = Depends(get_service),
        user: User = Depends(require_user),
    ):
        return CountRes(count=unwrap(service.count(user.id)).count)

    @router.get("/{entity_id}", response_model=response_model)
    def get_resource(
        entity_id: UUID,
        service: OwnedResourceService = Depends(get_service),
        user: User = Depends(require_user),
    ):
        result = unwrap(service.get(user.id, entity_id))
        return response_model.model_validate(result.item)

    @router.patch("/{entity_id}", response_model=response_model)
    def update_resource(
        entity_id: UUID,
        data: update_input,
        service: OwnedResourceService = Depends(get_service),
        user: User = Depends(require_user),
    ):
        result = unwrap(service.update(user.id, entity_id, data))
        return response_model.model_validate(result.item)

    @router.delete("/{entity_id}", response_model=DeleteRes)
    def delete_resource(
        entity_id: UUID,
        service: OwnedResourceService = Depends(get_service),
        user: User = Depends(require_user),
    ):
        return DeleteRes(deleted=unwrap(service.delete(user.id, entity_id)).deleted)

    return router


# =============================================================================
# Consultas extra (registradas antes del CRUD genérico)
# =============================================================================

projects_extra_router = APIRouter(prefix="/projects", tags=["projects"])


@projects_extra_router.get("/by-client/{client_id}", response_model=List[ProjectRes])
def list_projects_by_client(
    client_id: UUID,
    paging: PageParams = Depends(page_params),
    service: ProjectService = Depends(get_project_service),
    user: User = Depends(require_user),
):
    result = unwrap(
        service.list_by_client(user.id, client_id, paging.page, paging.limit)
    )
    return [ProjectRes.model_validate(item) for item in result.items]


tasks_extra_router = APIRouter(prefix="/tasks", tags=["tasks"])


@tasks_extra_router.get("/by-project/{project_id}", response_model=List[TaskRes])
def list_tasks_by_project(
    project_id: UUID,
    paging: PageParams = Depends(page_params),
    service: TaskService = Depends(get_task_service),
    user: User = Depends(require_user),
):
    result = unwrap(service.list_by_project(project_id, paging.page, paging.limit))
    return [TaskRes.model_validate(item) for item in result.items]


@tasks_extra_router.get("/by-project/{project_id}/count", response_model=CountRes)
def count_tasks_by_project(
    project_id: UUID,
    service: TaskService = Depends(get_task_service),
    user: User = Depends(require_user),
):
    return CountRes(count=unwrap(service.count_by_project(project_id)).count)


# =============================================================================
# CRUD por entidad
# =============================================================================

clients_router = build_resource_router(
    prefix="/clients",
    tag="clients",
    get_service=get_client_service,
    create_input=CreateClientInput,
    update_input=UpdateClientInput,
    response_model=ClientRes,
)

projects_router = build_resource_router(
    prefix="/projects",
    tag="projects",
    get_service=get_project_service,
    create_input=CreateProjectInput,
    update_input=UpdateProjectInput,
    response_model=ProjectRes,
)

tasks_router = build_resource_router(
    prefix="/tasks",
    tag="tasks",
    get_service=get_task_service,
    create_input=CreateTaskInput,
    update_input=UpdateTaskInput,
    response_model=TaskRes,
)

tags_router = build_resource_router(
    prefix="/tags",
    tag="tags",
    get_service=get_tag_service,
    create_input=CreateTagInput,
    update_input=UpdateTagInput,
    response_model=TagRes,
)

timer_presets_router = build_resource_router(
    prefix="/timer-presets",
    tag="timer-presets",
    get_service=get_timer_preset_service,
    create_input=CreateTimerPresetInput,
    update_input=UpdateTimerPresetInput,
    response_model=TimerPresetRes,
)
