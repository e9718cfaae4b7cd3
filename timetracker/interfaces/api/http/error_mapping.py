"""
===============================================================================
TARJETA CRC — error_mapping.py (ServiceError -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir ServiceError de servicios / casos de uso a AppHTTPException.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener application libre de HTTP.

Reglas:
  - BAD_REQUEST -> 400, UNAUTHORIZED -> 401, NOT_FOUND -> 404,
    INTERNAL_ERROR -> 500.
  - El mensaje del servicio viaja tal cual en `detail`.

Colaboradores:
  - application.usecases.results (ServiceError, ServiceErrorCode)
  - crosscutting.error_responses (factories RFC7807)
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from ....application.usecases.results import ServiceError, ServiceErrorCode
from ....crosscutting.error_responses import (
    bad_request,
    internal_error,
    not_found,
    unauthorized,
)


def raise_service_error(error: ServiceError) -> NoReturn:
    """Traduce ServiceErrorCode -> HTTP."""
    if error.code == ServiceErrorCode.BAD_REQUEST:
        raise bad_request(error.message)
    if error.code == ServiceErrorCode.UNAUTHORIZED:
        raise unauthorized(error.message)
    if error.code == ServiceErrorCode.NOT_FOUND:
        raise not_found(error.message)

    # Fallback: INTERNAL_ERROR y cualquier código nuevo.
    raise internal_error(error.message)


def unwrap(result):
    """
    Devuelve el resultado si no trae error; si trae, lo traduce a HTTP.

    Sirve para cualquier *Result con atributo `error`.
    """
    if result.error is not None:
        raise_service_error(result.error)
    return result
