"""
===============================================================================
TARJETA CRC — schemas/__init__.py
===============================================================================

Módulo:
    Paquete de Schemas HTTP (DTOs Pydantic de respuesta)

Responsabilidades:
    - Agrupar contratos HTTP por contexto (cuenta / recursos / time entries).
    - Mantener separados DTOs (schemas) de controladores (routers).

Reglas:
    - Schemas NO importan infraestructura ni ejecutan casos de uso.
    - Los bodies de request son los modelos de input de application
      (misma validación en HTTP y en servicios).
===============================================================================
"""

__all__ = []
