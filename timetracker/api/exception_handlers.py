"""
===============================================================================
TARJETA CRC — timetracker/api/exception_handlers.py (Manejo Centralizado)
===============================================================================

Responsabilidades:
  - Traducir excepciones internas a respuestas HTTP RFC7807.
  - Traducir RequestValidationError (FastAPI) a 400 con el mismo mensaje
    único "campo: msg, campo: msg" que devuelven los servicios.
  - DatabaseError -> 503 con code INTERNAL_ERROR (falla de persistencia,
    el cliente puede reintentar); el error_code interno queda en el log.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en errores no controlados.

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting.exceptions: TimeTrackerError y derivadas
  - application.usecases.validation.format_errors
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..application.usecases.validation import format_errors
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import (
    DatabaseError,
    IdentityProviderError,
    TimeTrackerError,
)
from ..crosscutting.logger import logger


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def _handle_service_error(
    request: Request,
    *,
    exc: TimeTrackerError,
    code: ErrorCode,
    status_code: int,
) -> JSONResponse:
    """Helper común para errores tipados de infraestructura."""
    request_id = _request_id_from(request)

    logger.error(
        "Error de servicio",
        extra={
            "code": code.value,
            "error_code": exc.error_code,
            "error_id": exc.error_id,
            "request_id": request_id,
        },
    )

    # R: el message interno puede traer SQL / hosts; en producción no sale.
    detail = "Service error." if get_settings().is_production() else exc.message
    app_exc = AppHTTPException(
        status_code=status_code,
        code=code,
        detail=detail,
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Falla del store -> 503 con code INTERNAL_ERROR."""
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.INTERNAL_ERROR, status_code=503
    )


async def identity_provider_error_handler(
    request: Request, exc: IdentityProviderError
) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.SERVICE_UNAVAILABLE, status_code=503
    )


async def timetracker_error_handler(
    request: Request, exc: TimeTrackerError
) -> JSONResponse:
    # R: Errores base: INTERNAL_ERROR por defecto.
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.INTERNAL_ERROR, status_code=500
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    app_exc = AppHTTPException(
        status_code=400,
        code=ErrorCode.BAD_REQUEST,
        detail=format_errors(exc.errors()),
    )
    return await app_exception_handler(request, app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica en producción.
    """
    request_id = _request_id_from(request)

    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": request_id, "error": str(exc)},
    )

    detail = "Error interno." if get_settings().is_production() else str(exc)
    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=detail,
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(IdentityProviderError, identity_provider_error_handler)
    app.add_exception_handler(TimeTrackerError, timetracker_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
