"""
===============================================================================
MÓDULO: Rate limiting de /auth (Token Bucket por IP) - in-memory
===============================================================================

Objetivo
--------
Frenar fuerza bruta de credenciales y bombardeo de emails limitando, por IP,
cada grupo de rutas sensibles:

  - AUTH            /auth/login, /auth/google        10 / 15 min
  - REGISTRATION    /auth/register                   5 / hora
  - PASSWORD_RESET  /auth/forgot-password, reset     3 / hora
  - EMAIL           /auth/verification/request       3 / hora

Los valores salen de Settings (`<grupo>_rate_limit` y
`<grupo>_rate_limit_window_seconds`).

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componentes:
  - TokenBucket
  - rate_limit(policy) -> dependency FastAPI

Responsabilidades:
  - Decidir allow/deny por (grupo, IP) con recarga continua
  - Emitir 429 RFC7807 con Retry-After
  - Informar X-RateLimit-Limit / X-RateLimit-Remaining
  - Mantener estado thread-safe y acotado (eviction LRU)

Colaboradores:
  - crosscutting.config
  - crosscutting.error_responses.rate_limited
  - crosscutting.logger
  - crosscutting.metrics (conteo de rechazos)
===============================================================================
"""

from __future__ import annotations

import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from fastapi import Request, Response

from .config import get_settings
from .error_responses import rate_limited
from .logger import logger
from .metrics import record_rate_limited

LIMIT_HEADER = "X-RateLimit-Limit"
REMAINING_HEADER = "X-RateLimit-Remaining"


class RateLimitPolicy(str, Enum):
    AUTH = "auth"
    REGISTRATION = "registration"
    PASSWORD_RESET = "password_reset"
    EMAIL = "email"


@dataclass
class _Bucket:
    tokens: float
    refilled_at: float


class TokenBucket:
    """
    `capacity` requests por `window_seconds` y por key.

    La recarga es continua (capacity / window tokens por segundo), así que
    un bucket vacío vuelve a aceptar una request antes de que pase la
    ventana completa.
    """

    def __init__(
        self,
        capacity: int,
        window_seconds: float,
        *,
        max_keys: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self.capacity = int(capacity)
        self.refill_per_second = self.capacity / float(window_seconds)
        self._max_keys = int(max_keys)
        self._clock = clock
        self._buckets: "OrderedDict[str, _Bucket]" = OrderedDict()
        self._lock = threading.Lock()

    def consume(self, key: str) -> tuple[bool, float]:
        """Devuelve (permitido, segundos hasta el próximo token)."""
        with self._lock:
            bucket = self._touch(key)
            if bucket.tokens >= 1:
                bucket.tokens -= 1
                return True, 0.0
            return False, (1 - bucket.tokens) / self.refill_per_second

    def remaining(self, key: str) -> int:
        with self._lock:
            if key not in self._buckets:
                return self.capacity
            return int(self._touch(key).tokens)

    def _touch(self, key: str) -> _Bucket:
        now = self._clock()
        bucket = self._buckets.get(key)
        if bucket is None:
            # R: eviction LRU; una key olvidada vuelve con el bucket lleno.
            if len(self._buckets) >= self._max_keys:
                self._buckets.popitem(last=False)
            bucket = _Bucket(tokens=float(self.capacity), refilled_at=now)
            self._buckets[key] = bucket
        else:
            elapsed = max(0.0, now - bucket.refilled_at)
            bucket.tokens = min(
                float(self.capacity), bucket.tokens + elapsed * self.refill_per_second
            )
            bucket.refilled_at = now
        self._buckets.move_to_end(key)
        return bucket


# -----------------------------------------------------------------------------
# Registro de limiters por política (singletons de proceso)
# -----------------------------------------------------------------------------
_limiters: Dict[RateLimitPolicy, TokenBucket] = {}
_limiters_lock = threading.Lock()


def get_rate_limiter(policy: RateLimitPolicy) -> TokenBucket:
    with _limiters_lock:
        limiter = _limiters.get(policy)
        if limiter is None:
            settings = get_settings()
            limiter = TokenBucket(
                capacity=getattr(settings, f"{policy.value}_rate_limit"),
                window_seconds=getattr(
                    settings, f"{policy.value}_rate_limit_window_seconds"
                ),
            )
            _limiters[policy] = limiter
        return limiter


def reset_rate_limiters() -> None:
    with _limiters_lock:
        _limiters.clear()


def get_client_identifier(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return f"ip:{forwarded_for.split(',')[0].strip()}"
    if request.client:
        return f"ip:{request.client.host}"
    return "ip:unknown"


def rate_limit(policy: RateLimitPolicy) -> Callable[[Request, Response], None]:
    """
    Dependency FastAPI que consume un token de (policy, IP).

    Uso: `@router.post(..., dependencies=[Depends(rate_limit(RateLimitPolicy.AUTH))])`
    """

    def _enforce(request: Request, response: Response) -> None:
        if not get_settings().rate_limit_enabled:
            return

        limiter = get_rate_limiter(policy)
        client_id = get_client_identifier(request)
        allowed, retry_after = limiter.consume(client_id)

        if not allowed:
            retry_after_seconds = max(1, math.ceil(retry_after))
            logger.warning(
                "rate limit excedido",
                extra={
                    "policy": policy.value,
                    "client_id": client_id,
                    "path": request.url.path,
                    "retry_after": retry_after_seconds,
                },
            )
            record_rate_limited(policy.value)
            exc = rate_limited(retry_after_seconds)
            exc.headers = {
                **(exc.headers or {}),
                LIMIT_HEADER: str(limiter.capacity),
                REMAINING_HEADER: "0",
            }
            raise exc

        response.headers[LIMIT_HEADER] = str(limiter.capacity)
        response.headers[REMAINING_HEADER] = str(limiter.remaining(client_id))

    return _enforce


__all__ = [
    "RateLimitPolicy",
    "TokenBucket",
    "get_client_identifier",
    "get_rate_limiter",
    "rate_limit",
    "reset_rate_limiters",
]
