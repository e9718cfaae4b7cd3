"""
===============================================================================
USE CASE: Ensure User Defaults (Provisioning)
===============================================================================

Name:
    EnsureUserDefaultsUseCase

Business Goal:
    Sembrar los datos por defecto de una cuenta:
      1) Project "Focus" (activo)
      2) TimerPresets "🍅 Pomodoro" (25/5 x4) y "💻 52/17" (52/17 x4)
      3) default_timer_preset_id -> primer preset

Why (Context / Intención):
    - La registración nunca se bloquea por setup opcional, pero un setup
      parcial debe ser recuperable: execute() es idempotente (busca por
      nombre antes de crear) y puede re-ejecutarse cuantas veces haga falta
      (ej: POST /users/me/defaults).
    - provision() es la variante best-effort usada en register: reintenta
      con tenacity y, si igual falla, loguea y devuelve None.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    EnsureUserDefaultsUseCase

Responsibilities:
    - Buscar-o-crear el proyecto y los presets por defecto (en orden).
    - Asignar el preset por defecto solo si el usuario no tiene uno.
    - Reintentar la secuencia completa ante fallas (tenacity).

Collaborators:
    - UserRepository
    - OwnedResourceRepository[Project] / OwnedResourceRepository[TimerPreset]
    - tenacity.Retrying
    - crosscutting.logger

-------------------------------------------------------------------------------
Error Mapping:
    - NOT_FOUND: el usuario no existe
    - Fallas de store: se propagan desde execute(); provision() las absorbe
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import UUID, uuid4

from tenacity import RetryCallState, Retrying, stop_after_attempt, wait_fixed

from ..crosscutting.exceptions import ProvisioningError
from ..crosscutting.logger import logger
from ..domain.entities import Project, ProjectStatus, TimerPreset
from ..domain.repositories import OwnedResourceRepository, UserRepository
from ..identity.users import User
from .usecases.results import ResourceResult, not_found

DEFAULT_PROJECT_NAME = "Focus"
DEFAULT_PROJECT_DESCRIPTION = "Default project for focused work sessions"
DEFAULT_PROJECT_COLOR = "#33d17a"


@dataclass(frozen=True)
class PresetTemplate:
    name: str
    work_duration: int
    break_duration: int
    repetitions: int


# R: El primero es el preset por defecto de la cuenta.
DEFAULT_PRESETS: Tuple[PresetTemplate, ...] = (
    PresetTemplate("🍅 Pomodoro", 25, 5, 4),
    PresetTemplate("💻 52/17", 52, 17, 4),
)


class EnsureUserDefaultsUseCase:
    """
    Use Case (Command, idempotente):
        Garantiza que la cuenta tenga proyecto y presets por defecto.
    """

    def __init__(
        self,
        users: UserRepository,
        projects: OwnedResourceRepository[Project],
        presets: OwnedResourceRepository[TimerPreset],
        *,
        max_attempts: int = 2,
    ) -> None:
        self._users = users
        self._projects = projects
        self._presets = presets
        self._max_attempts = max_attempts

    def execute(self, user_id: UUID) -> ResourceResult[User]:
        # ---------------------------------------------------------------------
        # 0) El usuario debe existir.
        # ---------------------------------------------------------------------
        user = self._users.get_by_id(user_id)
        if user is None:
            return ResourceResult(error=not_found("User"))

        # ---------------------------------------------------------------------
        # 1) Proyecto por defecto.
        # ---------------------------------------------------------------------
        self._ensure_project(user_id)

        # ---------------------------------------------------------------------
        # 2) Presets por defecto (en orden: el primero es el default).
        # ---------------------------------------------------------------------
        presets = [self._ensure_preset(user_id, template) for template in DEFAULT_PRESETS]

        # ---------------------------------------------------------------------
        # 3) Preset por defecto (solo si no hay uno elegido).
        # ---------------------------------------------------------------------
        if user.default_timer_preset_id is None:
            user = self._users.update(
                user_id, {"default_timer_preset_id": presets[0].id}
            )
            if user is None:
                raise ProvisioningError("Default timer preset could not be assigned")

        return ResourceResult(item=user)

    def provision(self, user_id: UUID) -> Optional[User]:
        """
        Best-effort: reintenta execute() y nunca lanza.

        Devuelve el usuario actualizado, o None si la cuenta quedó sin
        (todos los) defaults.
        """
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_fixed(0),
            before_sleep=_log_attempt_failed,
            reraise=True,
        )
        try:
            result = retrying(self.execute, user_id)
        except Exception:
            logger.exception(
                "Provisioning de defaults falló",
                extra={"user_id": str(user_id), "attempts": self._max_attempts},
            )
            return None

        if result.error is not None:
            logger.warning(
                "Provisioning omitido",
                extra={"user_id": str(user_id), "reason": result.error.message},
            )
            return None

        logger.info("Defaults provisionados", extra={"user_id": str(user_id)})
        return result.item

    # =========================================================================
    # Helpers privados
    # =========================================================================
    def _ensure_project(self, user_id: UUID) -> Project:
        existing = self._projects.list(
            filters={"user_id": user_id, "name": DEFAULT_PROJECT_NAME}, limit=1
        )
        if existing:
            return existing[0]

        created = self._projects.create(
            Project(
                id=uuid4(),
                user_id=user_id,
                name=DEFAULT_PROJECT_NAME,
                description=DEFAULT_PROJECT_DESCRIPTION,
                color=DEFAULT_PROJECT_COLOR,
                status=ProjectStatus.ACTIVE,
            )
        )
        if created is None:
            raise ProvisioningError("Default project could not be created")
        return created

    def _ensure_preset(self, user_id: UUID, template: PresetTemplate) -> TimerPreset:
        existing = self._presets.list(
            filters={"user_id": user_id, "name": template.name}, limit=1
        )
        if existing:
            return existing[0]

        created = self._presets.create(
            TimerPreset(
                id=uuid4(),
                user_id=user_id,
                name=template.name,
                work_duration=template.work_duration,
                break_duration=template.break_duration,
                repetitions=template.repetitions,
            )
        )
        if created is None:
            raise ProvisioningError(f"Timer preset {template.name!r} could not be created")
        return created


def _log_attempt_failed(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Reintentando provisioning",
        extra={
            "attempt": retry_state.attempt_number,
            "error": str(exc) if exc else None,
            "error_type": type(exc).__name__ if exc else None,
        },
    )
