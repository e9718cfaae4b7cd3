"""
===============================================================================
USE CASE: Timer Preset Service
===============================================================================

Class:
    TimerPresetService

Responsibilities:
    - CRUD owner-scoped de TimerPresets (ciclos trabajo/descanso en minutos).
    - Invariantes de input: work/break >= 1 minuto, repetitions >= 1.

Collaborators:
    - OwnedResourceRepository[TimerPreset]
    - application.provisioning (crea los presets por defecto)
===============================================================================
"""

from __future__ import annotations

from ....domain.entities import TimerPreset
from .inputs import CreateTimerPresetInput, UpdateTimerPresetInput
from .owned_resource_service import OwnedResourceService


class TimerPresetService(OwnedResourceService[TimerPreset]):
    resource_name = "TimerPreset"
    entity_cls = TimerPreset
    create_input = CreateTimerPresetInput
    update_input = UpdateTimerPresetInput
