from .owned_resources import InMemoryOwnedResourceRepository
from .time_entries import InMemoryTimeEntryRepository
from .users import InMemoryUserRepository

__all__ = [
    "InMemoryOwnedResourceRepository",
    "InMemoryTimeEntryRepository",
    "InMemoryUserRepository",
]
