"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus) del time tracker

Responsabilidades:
    - Definir las métricas en un registry propio (singleton de proceso).
    - HTTP: conteo por endpoint/método/status y latencia por endpoint/método.
    - Dominio: transiciones de timers (started / stopped / replaced) y
      requests rechazadas por rate limit (por grupo de rutas).
    - Cuidar cardinalidad: ids de recursos -> `{id}`, status agrupado (2xx...).
    - Generar el body de /metrics.

Colaboradores:
    - crosscutting.middleware: registra latencia y conteo HTTP.
    - crosscutting.rate_limit: cuenta rechazos 429.
    - application.usecases.time_entries: cuenta transiciones de timers.
    - api.main: expone GET /metrics.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

_requests_total = Counter(
    "timetracker_http_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=REGISTRY,
)

_request_latency = Histogram(
    "timetracker_http_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=REGISTRY,
)

_timer_transitions_total = Counter(
    "timetracker_timer_transitions_total",
    "Transiciones de timers (started, stopped, replaced)",
    ["transition"],
    registry=REGISTRY,
)

_rate_limited_total = Counter(
    "timetracker_rate_limited_total",
    "Requests rechazadas con 429 por grupo de rutas",
    ["policy"],
    registry=REGISTRY,
)

TIMER_TRANSITIONS = frozenset({"started", "stopped", "replaced"})

_UUID_SEGMENT = re.compile(
    r"/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}(?=/|$)",
    re.IGNORECASE,
)
_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")


def normalize_endpoint(path: str) -> str:
    """`/projects/by-client/<uuid>` -> `/projects/by-client/{id}`."""
    path = _UUID_SEGMENT.sub("/{id}", path)
    return _NUMERIC_SEGMENT.sub("/{id}", path)


def status_bucket(code: int) -> str:
    if 200 <= code < 300:
        return "2xx"
    if 300 <= code < 400:
        return "3xx"
    if 400 <= code < 500:
        return "4xx"
    return "5xx"


def record_request_metrics(
    endpoint: str, method: str, status_code: int, latency_seconds: float
) -> None:
    normalized = normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=status_bucket(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        max(0.0, latency_seconds)
    )


def record_timer_transition(transition: str) -> None:
    if transition not in TIMER_TRANSITIONS:
        raise ValueError(f"Unknown timer transition: {transition}")
    _timer_transitions_total.labels(transition=transition).inc()


def record_rate_limited(policy: str) -> None:
    _rate_limited_total.labels(policy=policy).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Body + content-type para /metrics."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


__all__ = [
    "REGISTRY",
    "get_metrics_response",
    "normalize_endpoint",
    "record_rate_limited",
    "record_request_metrics",
    "record_timer_transition",
    "status_bucket",
]
