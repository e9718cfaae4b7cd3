from .errors import DatabasePoolError, PoolAlreadyInitializedError, PoolNotInitializedError
from .pool import close_pool, get_pool, init_pool, reset_pool

__all__ = [
    "DatabasePoolError",
    "PoolAlreadyInitializedError",
    "PoolNotInitializedError",
    "close_pool",
    "get_pool",
    "init_pool",
    "reset_pool",
]
