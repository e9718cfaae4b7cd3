"""
===============================================================================
INPUT VALIDATION (pydantic -> mensaje único)
===============================================================================

Responsibilities:
    - Validar payloads crudos (dict) contra los modelos de input.
    - Colectar TODOS los campos inválidos en un único mensaje legible:
        "name: Name is required, color: Invalid color format (should be hex)"
    - Aceptar instancias ya validadas sin re-validarlas.

Collaborators:
    - pydantic.ValidationError
    - application/usecases/*/inputs.py
    - api/exception_handlers.py (mismo formato para RequestValidationError)
===============================================================================
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)

# Prefijos que pydantic agrega a mensajes de validators propios.
_VALUE_ERROR_PREFIX = "Value error, "

_REQUEST_LOCATIONS = frozenset({"body", "query", "path"})


def _field_path(loc: Iterable[Any]) -> str:
    # R: "body"/"query"/"path" los agrega FastAPI; no aportan al cliente.
    parts = [str(p) for p in loc if p not in _REQUEST_LOCATIONS]
    return ".".join(parts) or "input"


def _clean_message(msg: str) -> str:
    if msg.startswith(_VALUE_ERROR_PREFIX):
        return msg[len(_VALUE_ERROR_PREFIX) :]
    return msg


def format_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    """Formatea errores estilo pydantic como 'campo: msg, campo: msg'."""
    return ", ".join(
        f"{_field_path(err.get('loc', ()))}: {_clean_message(str(err.get('msg', '')))}"
        for err in errors
    )


def validate_input(
    model: Type[M], payload: Union[M, Mapping[str, Any], None]
) -> Tuple[Optional[str], Optional[M]]:
    """
    Valida payload contra model.

    Retorna (error, instancia): exactamente uno de los dos es None.
    """
    if isinstance(payload, model):
        return None, payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)

    try:
        return None, model.model_validate(dict(payload or {}))
    except ValidationError as exc:
        return format_errors(exc.errors()), None
