from .owned_resources import PostgresOwnedResourceRepository
from .resources import (
    client_repository,
    project_repository,
    tag_repository,
    task_repository,
    timer_preset_repository,
)
from .time_entries import PostgresTimeEntryRepository
from .users import PostgresUserRepository

__all__ = [
    "PostgresOwnedResourceRepository",
    "PostgresTimeEntryRepository",
    "PostgresUserRepository",
    "client_repository",
    "project_repository",
    "tag_repository",
    "task_repository",
    "timer_preset_repository",
]
