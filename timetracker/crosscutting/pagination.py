"""
===============================================================================
MÓDULO: Utilidades de paginación (page / limit, 1-based)
===============================================================================

Objetivo
--------
Paginación simple y consistente para listados:
- page 1-based, limit positivo
- defaults cuando el caller los omite (page 1, limit desde Settings)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  PageRequest + resolve_page

Responsabilidades:
  - Validar y normalizar page/limit
  - Traducir page/limit -> offset
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Página pedida por el caller, ya validada."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def resolve_page(
    page: int | None,
    limit: int | None,
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int | None = None,
) -> tuple[Optional[str], Optional[PageRequest]]:
    """
    Valida page/limit y aplica defaults.

    Retorna (error, PageRequest): exactamente uno de los dos es None.
    - page < 1 o limit < 1 => error legible
    - limit > max_limit => se recorta a max_limit
    """
    resolved_page = DEFAULT_PAGE if page is None else page
    resolved_limit = default_limit if limit is None else limit

    problems: list[str] = []
    if resolved_page < 1:
        problems.append("page: must be greater than or equal to 1")
    if resolved_limit < 1:
        problems.append("limit: must be greater than or equal to 1")
    if problems:
        return ", ".join(problems), None

    if max_limit is not None:
        resolved_limit = min(resolved_limit, max_limit)

    return None, PageRequest(page=resolved_page, limit=resolved_limit)
