"""
Resource Use Cases

CRUD owner-scoped de Client / Project / Task / Tag / TimerPreset sobre un
único servicio genérico (OwnedResourceService).
"""

from .clients import ClientService
from .inputs import (
    CreateClientInput,
    CreateProjectInput,
    CreateTagInput,
    CreateTaskInput,
    CreateTimerPresetInput,
    UpdateClientInput,
    UpdateProjectInput,
    UpdateTagInput,
    UpdateTaskInput,
    UpdateTimerPresetInput,
)
from .owned_resource_service import OwnedResourceService
from .projects import ProjectService
from .tags import TagService
from .tasks import TaskService
from .timer_presets import TimerPresetService

__all__ = [
    "ClientService",
    "CreateClientInput",
    "CreateProjectInput",
    "CreateTagInput",
    "CreateTaskInput",
    "CreateTimerPresetInput",
    "OwnedResourceService",
    "ProjectService",
    "TagService",
    "TaskService",
    "TimerPresetService",
    "UpdateClientInput",
    "UpdateProjectInput",
    "UpdateTagInput",
    "UpdateTaskInput",
    "UpdateTimerPresetInput",
]
