"""
===============================================================================
TARJETA CRC — domain/ownership_policy.py
===============================================================================

Módulo:
    Política de Propiedad (un recurso solo es visible para su dueño)

Responsabilidades:
    - Definir la regla única de acceso a recursos "owned": resource.user_id
      debe coincidir con el caller.
    - Ser 100% pura y testeable (sin DB, sin FastAPI).

Colaboradores:
    - application/usecases/resources.OwnedResourceService (get/update/delete)
    - application/usecases/time_entries.TimeEntryService
    - application/provisioning

Reglas:
    - Inexistente y ajeno son el MISMO resultado (None): la capa superior
      responde NOT_FOUND en ambos casos y nunca FORBIDDEN, para no confirmar
      que el recurso existe.
===============================================================================
"""

from __future__ import annotations

from typing import Optional, Protocol, TypeVar
from uuid import UUID


class OwnedResource(Protocol):
    """Cualquier entidad con dueño."""

    @property
    def user_id(self) -> UUID: ...


R = TypeVar("R", bound=OwnedResource)


def is_owner(resource: OwnedResource, caller_id: UUID | None) -> bool:
    return caller_id is not None and resource.user_id == caller_id


def authorize(resource: Optional[R], caller_id: UUID | None) -> Optional[R]:
    """
    Devuelve el recurso si el caller es su dueño; None en otro caso.

    None cubre: recurso inexistente, caller anónimo y dueño distinto.
    """
    if resource is None or not is_owner(resource, caller_id):
        return None
    return resource
