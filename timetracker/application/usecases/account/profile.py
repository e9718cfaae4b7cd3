"""
===============================================================================
USE CASES: Profile (get / update)
===============================================================================

Responsibilities:
    - Leer el perfil del usuario autenticado.
    - Actualizar nombre, email, idioma, tema, foto y preset por defecto.
    - Mantener invariantes:
        * email único (case-insensitive)
        * cambiar el email invalida la verificación previa
        * el preset por defecto debe ser del mismo usuario

Collaborators:
    - UserRepository
    - OwnedResourceRepository[TimerPreset]
    - domain.ownership_policy.authorize
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.exceptions import DuplicateUserError
from ....domain.entities import TimerPreset
from ....domain.ownership_policy import authorize
from ....domain.repositories import OwnedResourceRepository, UserRepository
from ....identity.users import User
from ..results import ResourceResult, bad_request, internal_error, not_found
from ..validation import validate_input
from .inputs import UpdateProfileInput

# R: null explícito = "quitar" (sin preset por defecto / sin foto).
_CLEARABLE = frozenset({"default_timer_preset_id", "picture"})


class GetProfileUseCase:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: UUID) -> ResourceResult[User]:
        user = self._users.get_by_id(user_id)
        if user is None:
            return ResourceResult(error=not_found("User"))
        return ResourceResult(item=user)


class UpdateProfileUseCase:
    def __init__(
        self, users: UserRepository, presets: OwnedResourceRepository[TimerPreset]
    ) -> None:
        self._users = users
        self._presets = presets

    def execute(
        self, user_id: UUID, data: UpdateProfileInput | dict
    ) -> ResourceResult[User]:
        # ---------------------------------------------------------------------
        # 1) Validar input + existencia.
        # ---------------------------------------------------------------------
        error, payload = validate_input(UpdateProfileInput, data)
        if error is not None:
            return ResourceResult(error=bad_request(error, "User"))

        user = self._users.get_by_id(user_id)
        if user is None:
            return ResourceResult(error=not_found("User"))

        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in _CLEARABLE
        }

        # ---------------------------------------------------------------------
        # 2) Email: único; un cambio invalida la verificación.
        # ---------------------------------------------------------------------
        new_email = changes.get("email")
        if new_email is not None and new_email != user.email.lower():
            owner = self._users.get_by_email(new_email)
            if owner is not None and owner.id != user.id:
                return ResourceResult(error=bad_request("Email already in use", "User"))
            changes.update(
                {
                    "email_verified": False,
                    "pending_verification": None,
                    "last_verification_request": None,
                }
            )
        elif new_email is not None:
            changes.pop("email")

        # ---------------------------------------------------------------------
        # 3) Preset por defecto: debe existir y ser del usuario.
        # ---------------------------------------------------------------------
        preset_id = changes.get("default_timer_preset_id")
        if preset_id is not None and authorize(self._presets.get(preset_id), user.id) is None:
            return ResourceResult(
                error=bad_request(
                    "default_timer_preset_id: TimerPreset not found", "User"
                )
            )

        if not changes:
            return ResourceResult(item=user)

        try:
            updated = self._users.update(user.id, changes)
        except DuplicateUserError:
            return ResourceResult(error=bad_request("Email already in use", "User"))
        if updated is None:
            return ResourceResult(
                error=internal_error("User could not be updated", "User")
            )
        return ResourceResult(item=updated)
