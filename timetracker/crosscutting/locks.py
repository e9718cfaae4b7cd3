"""
===============================================================================
MÓDULO: Locks por clave (exclusión mutua por usuario)
===============================================================================

Objetivo
--------
Serializar secuencias check-then-act que el store no hace atómicas por sí
solo (ej: "buscar timer corriendo -> detenerlo -> crear el nuevo").

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  KeyedLock

Responsabilidades:
  - Entregar un threading.Lock estable por clave (user_id)
  - Liberar entradas sin uso para evitar crecimiento ilimitado

Colaboradores:
  - application/usecases/time_entries (stop-and-replace)

Restricciones:
  - Alcance: un proceso. Entre procesos el respaldo es el índice único parcial
    de time_entries (un solo is_running por usuario).
===============================================================================
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterator


@dataclass
class _Entry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class KeyedLock:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      KeyedLock

    Responsabilidades:
      - Exclusión mutua por clave
      - Conteo de holders/waiters para limpiar entradas al soltar

    Colaboradores:
      - TimeEntryService
    ----------------------------------------------------------------------------
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: Dict[Hashable, _Entry] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._entries.setdefault(key, _Entry())
            entry.holders += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
