"""
===============================================================================
USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Service / Use Case Results

Business Goal:
    Proveer modelos compartidos de resultados y errores para recursos,
    time entries y ciclo de vida de cuentas, con un contrato estable para:
      - input inválido o regla de negocio violada (BAD_REQUEST)
      - credenciales / tokens inválidos (UNAUTHORIZED)
      - recurso inexistente o ajeno (NOT_FOUND, indistinguibles)
      - fallas inesperadas de persistencia / firma (INTERNAL_ERROR)

Why (Context / Intención):
    - Los servicios devuelven resultados tipados en lugar de lanzar
      excepciones “hacia afuera”, facilitando:
        * el mapeo a HTTP en un único lugar (error_mapping)
        * tests unitarios de flujos sin try/except
    - Las fallas de infraestructura (DatabaseError) sí se propagan como
      excepción y las mapea el exception handler.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    results models (module)

Responsibilities:
    - Definir ServiceErrorCode / ServiceError.
    - Representar resultados de cada forma de operación.

Collaborators:
    - domain.entities (tipos de entidad retornados)
    - identity.users.User
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar

from ...identity.users import User

E = TypeVar("E")


class ServiceErrorCode(str, Enum):
    """
    Códigos:
      - BAD_REQUEST: input inválido o regla de negocio ("already exists", etc.)
      - UNAUTHORIZED: credenciales inválidas, token inválido/expirado
      - NOT_FOUND: recurso inexistente o de otro usuario
      - INTERNAL_ERROR: el store "aceptó" pero no devolvió registro, o falló
        la firma de un token
    """

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class ServiceError:
    """
    Error de caso de uso.

    Campos:
      - code: categoría estable
      - message: descripción humana (para UI/logs)
      - resource: nombre de la entidad involucrada (si aplica)
    """

    code: ServiceErrorCode
    message: str
    resource: str | None = None


@dataclass
class ResourceResult(Generic[E]):
    """Resultado con una única entidad (error is None => item presente)."""

    item: Optional[E] = None
    error: ServiceError | None = None


@dataclass
class ResourceListResult(Generic[E]):
    items: List[E] = field(default_factory=list)
    error: ServiceError | None = None


@dataclass
class DeleteResult:
    deleted: bool = False
    error: ServiceError | None = None


@dataclass
class CountResult:
    count: int = 0
    error: ServiceError | None = None


@dataclass
class AuthResult:
    """Usuario + token de sesión (register / login / google)."""

    user: User | None = None
    token: str | None = None
    error: ServiceError | None = None


@dataclass
class ActionResult:
    """Comandos sin payload (forgot/reset password, verificación)."""

    ok: bool = False
    message: str = ""
    error: ServiceError | None = None


@dataclass
class VerificationStatusResult:
    verified: bool = False
    pending: bool = False
    expires_at: datetime | None = None
    error: ServiceError | None = None


# -----------------------------------------------------------------------------
# Factories (evitan duplicar códigos/mensajes en cada servicio)
# -----------------------------------------------------------------------------


def bad_request(message: str, resource: str | None = None) -> ServiceError:
    return ServiceError(ServiceErrorCode.BAD_REQUEST, message, resource)


def unauthorized(message: str = "Invalid credentials") -> ServiceError:
    return ServiceError(ServiceErrorCode.UNAUTHORIZED, message)


def not_found(resource: str) -> ServiceError:
    return ServiceError(ServiceErrorCode.NOT_FOUND, f"{resource} not found", resource)


def internal_error(message: str, resource: str | None = None) -> ServiceError:
    return ServiceError(ServiceErrorCode.INTERNAL_ERROR, message, resource)


def describe(error: ServiceError | None) -> dict[str, Any]:
    """Extra de logging consistente para un error de servicio."""
    if error is None:
        return {}
    return {"error_code": error.code.value, "error_message": error.message}
