"""
===============================================================================
USE CASE: Client Service
===============================================================================

Class:
    ClientService

Responsibilities:
    - CRUD owner-scoped de Clients (hereda OwnedResourceService).
    - Default de color: #e74c3c.

Collaborators:
    - OwnedResourceRepository[Client]
===============================================================================
"""

from __future__ import annotations

from ....domain.entities import Client
from .inputs import CreateClientInput, UpdateClientInput
from .owned_resource_service import OwnedResourceService


class ClientService(OwnedResourceService[Client]):
    resource_name = "Client"
    entity_cls = Client
    create_input = CreateClientInput
    update_input = UpdateClientInput
