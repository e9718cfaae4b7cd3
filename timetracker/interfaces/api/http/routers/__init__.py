"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Re-exportar routers por contexto para el router raíz.

Notas:
    - Este archivo NO define endpoints.
===============================================================================
"""

from .resources import (
    clients_router,
    projects_extra_router,
    projects_router,
    tags_router,
    tasks_extra_router,
    tasks_router,
    timer_presets_router,
)
from .time_entries import router as time_entries_router
from .users import router as users_router

__all__ = [
    "clients_router",
    "projects_extra_router",
    "projects_router",
    "tags_router",
    "tasks_extra_router",
    "tasks_router",
    "time_entries_router",
    "timer_presets_router",
    "users_router",
]
