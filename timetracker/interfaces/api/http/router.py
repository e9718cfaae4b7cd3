"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (app.include_router).
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer routers por contexto (usuarios / recursos / time entries).

Colaboradores:
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
  - routers.* (sub-routers por feature)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers import (
    clients_router,
    projects_extra_router,
    projects_router,
    tags_router,
    tasks_extra_router,
    tasks_router,
    time_entries_router,
    timer_presets_router,
    users_router,
)


def build_router() -> APIRouter:
    """Construye el router raíz (testeable sin levantar la app)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

    api_router.include_router(users_router)
    api_router.include_router(clients_router)
    # R: /by-* antes del CRUD genérico del mismo prefijo.
    api_router.include_router(projects_extra_router)
    api_router.include_router(projects_router)
    api_router.include_router(tasks_extra_router)
    api_router.include_router(tasks_router)
    api_router.include_router(tags_router)
    api_router.include_router(timer_presets_router)
    api_router.include_router(time_entries_router)

    return api_router


router = build_router()

__all__ = ["router", "build_router"]
