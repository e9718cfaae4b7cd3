"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Mantener estable el “surface area” del dominio.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    Client,
    Project,
    ProjectStatus,
    Tag,
    Task,
    TaskStatus,
    TimeEntry,
    TimerPreset,
)
from .ownership_policy import authorize, is_owner
from .repositories import (
    OwnedResourceRepository,
    TimeEntryRepository,
    UserRepository,
)
from .services import (
    EmailSender,
    GoogleIdentity,
    GoogleIdentityVerifier,
    PasswordHasher,
    TokenPurpose,
    TokenService,
)

__all__ = [
    # Entities
    "Client",
    "Project",
    "ProjectStatus",
    "Tag",
    "Task",
    "TaskStatus",
    "TimeEntry",
    "TimerPreset",
    # Policy
    "authorize",
    "is_owner",
    # Repositories
    "OwnedResourceRepository",
    "TimeEntryRepository",
    "UserRepository",
    # Services
    "EmailSender",
    "GoogleIdentity",
    "GoogleIdentityVerifier",
    "PasswordHasher",
    "TokenPurpose",
    "TokenService",
]
