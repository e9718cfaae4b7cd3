"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/resources.py
============================================================
Responsibilities:
- Construir los repos de catálogo (clients, projects, tasks, tags,
  timer_presets) sobre PostgresOwnedResourceRepository, declarando tabla,
  entidad y decoders de enums.
============================================================
"""

from __future__ import annotations

from typing import Optional

from psycopg_pool import ConnectionPool

from ....domain.entities import (
    Client,
    Project,
    ProjectStatus,
    Tag,
    Task,
    TaskStatus,
    TimerPreset,
)
from .owned_resources import PostgresOwnedResourceRepository


def client_repository(pool: Optional[ConnectionPool] = None):
    return PostgresOwnedResourceRepository(table="clients", entity_cls=Client, pool=pool)


def project_repository(pool: Optional[ConnectionPool] = None):
    return PostgresOwnedResourceRepository(
        table="projects",
        entity_cls=Project,
        decoders={"status": ProjectStatus},
        pool=pool,
    )


def task_repository(pool: Optional[ConnectionPool] = None):
    return PostgresOwnedResourceRepository(
        table="tasks",
        entity_cls=Task,
        decoders={"status": TaskStatus},
        pool=pool,
    )


def tag_repository(pool: Optional[ConnectionPool] = None):
    return PostgresOwnedResourceRepository(table="tags", entity_cls=Tag, pool=pool)


def timer_preset_repository(pool: Optional[ConnectionPool] = None):
    return PostgresOwnedResourceRepository(
        table="timer_presets", entity_cls=TimerPreset, pool=pool
    )
