"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

Los errores de negocio (not found, bad request, unauthorized) NO viajan como
excepción: los servicios devuelven resultados tipados. Acá solo viven las
fallas de infraestructura que deben cortar el flujo.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  TimeTrackerError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class TimeTrackerError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      TimeTrackerError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "TIMETRACKER_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(TimeTrackerError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class EmailDeliveryError(TimeTrackerError):
    """Falla del transporte de email (SMTP caído, rechazo del servidor)."""

    error_code: str = "EMAIL_DELIVERY_ERROR"


class ProvisioningError(TimeTrackerError):
    """El store no devolvió registro al sembrar los defaults de una cuenta."""

    error_code: str = "PROVISIONING_ERROR"


class IdentityProviderError(TimeTrackerError):
    """El proveedor de identidad externo (Google) no respondió."""

    error_code: str = "IDENTITY_PROVIDER_ERROR"


class DuplicateUserError(TimeTrackerError):
    """Ya existe una cuenta con ese email (o google_id): índice único violado."""

    error_code: str = "DUPLICATE_USER"
