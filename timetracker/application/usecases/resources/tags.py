"""
===============================================================================
USE CASE: Tag Service
===============================================================================

Class:
    TagService

Responsibilities:
    - CRUD owner-scoped de Tags. Default de color: #2ecc71.
===============================================================================
"""

from __future__ import annotations

from ....domain.entities import Tag
from .inputs import CreateTagInput, UpdateTagInput
from .owned_resource_service import OwnedResourceService


class TagService(OwnedResourceService[Tag]):
    resource_name = "Tag"
    entity_cls = Tag
    create_input = CreateTagInput
    update_input = UpdateTagInput
