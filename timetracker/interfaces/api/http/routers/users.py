"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/users.py
===============================================================================

Class/Module:
    Users Router (perfil del usuario autenticado)

Responsibilities:
    - Leer / actualizar el perfil propio.
    - Cambiar password (requiere el actual).
    - Reconciliar defaults (proyecto Focus + presets) de una cuenta
      provisionada a medias.

Collaborators:
    - application.usecases.account (profile / passwords)
    - application.provisioning.EnsureUserDefaultsUseCase
    - container (factories DI)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from .....application.provisioning import EnsureUserDefaultsUseCase
from .....application.usecases.account import (
    ChangePasswordInput,
    ChangePasswordUseCase,
    GetProfileUseCase,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from .....container import (
    get_change_password_use_case,
    get_ensure_user_defaults_use_case,
    get_profile_use_case,
    get_update_profile_use_case,
)
from .....identity.users import User
from ..dependencies import require_user
from ..error_mapping import unwrap
from ..schemas.accounts import UserRes, to_user_res
from ..schemas.common import MessageRes

router = APIRouter(prefix="/users/me", tags=["users"])


@router.get("", response_model=UserRes)
def get_profile(
    user: User = Depends(require_user),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
):
    return to_user_res(unwrap(use_case.execute(user.id)).item)


@router.patch("", response_model=UserRes)
def update_profile(
    data: UpdateProfileInput,
    user: User = Depends(require_user),
    use_case: UpdateProfileUseCase = Depends(get_update_profile_use_case),
):
    return to_user_res(unwrap(use_case.execute(user.id, data)).item)


@router.post("/password", response_model=MessageRes)
def change_password(
    data: ChangePasswordInput,
    user: User = Depends(require_user),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
):
    return MessageRes(message=unwrap(use_case.execute(user.id, data)).message)


@router.post("/defaults", response_model=UserRes)
def ensure_defaults(
    user: User = Depends(require_user),
    use_case: EnsureUserDefaultsUseCase = Depends(get_ensure_user_defaults_use_case),
):
    """Idempotente: solo crea lo que falta."""
    return to_user_res(unwrap(use_case.execute(user.id)).item)
