"""
===============================================================================
USE CASE: Owned Resource Service (CRUD genérico con guard de propiedad)
===============================================================================

Name:
    OwnedResourceService[E]

Business Goal:
    Implementar UNA vez el ciclo de vida de cualquier recurso con dueño
    (Client, Project, Task, Tag, TimerPreset, TimeEntry):
      - create / get / update / delete / list / count
    dejando a cada subclase solo lo que cambia: modelos de input, defaults,
    referencias a validar y consultas extra.

Why (Context / Intención):
    - Las cinco entidades comparten la misma forma; duplicar el CRUD cinco
      veces duplica también (y desalinea) la regla de propiedad.
    - El guard de propiedad se aplica en un único punto (_load_owned) antes
      de cualquier lectura puntual o mutación.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    OwnedResourceService

Responsibilities:
    - Validar inputs (mensaje único con todos los campos inválidos).
    - Validar que las referencias apunten a recursos del mismo dueño.
    - Construir entidades con user_id = caller y persistirlas.
    - Aplicar ownership_policy.authorize en get/update/delete.
    - Scopear list/count por user_id del caller.
    - Devolver resultados tipados (ResourceResult, DeleteResult, ...).

Collaborators:
    - domain.repositories.OwnedResourceRepository
    - domain.ownership_policy.authorize
    - crosscutting.pagination.resolve_page
    - application.usecases.validation.validate_input
    - application.usecases.results

-------------------------------------------------------------------------------
Error Mapping:
    - BAD_REQUEST: input inválido, página inválida, referencia inexistente/ajena
    - NOT_FOUND: id inexistente o de otro usuario (mismo mensaje)
    - INTERNAL_ERROR: el store no devolvió registro tras create/update
===============================================================================
"""

from __future__ import annotations

from typing import (
    Any,
    ClassVar,
    Dict,
    FrozenSet,
    Generic,
    Mapping,
    Optional,
    Type,
    TypeVar,
    Union,
)
from uuid import UUID, uuid4

from pydantic import BaseModel

from ....crosscutting.logger import logger
from ....crosscutting.pagination import DEFAULT_LIMIT, PageRequest, resolve_page
from ....domain.ownership_policy import authorize
from ....domain.repositories import OwnedResourceRepository
from ..results import (
    CountResult,
    DeleteResult,
    ResourceListResult,
    ResourceResult,
    ServiceError,
    bad_request,
    internal_error,
    not_found,
)
from ..validation import validate_input

E = TypeVar("E")

InputPayload = Union[BaseModel, Mapping[str, Any], None]


class OwnedResourceService(Generic[E]):
    """
    Application Service genérico.

    Subclases definen:
      - resource_name: nombre para mensajes ("Client", "Project", ...)
      - entity_cls: dataclass de dominio
      - create_input / update_input: modelos pydantic
      - clearable_fields: campos que aceptan null explícito en update
    y opcionalmente sobreescriben _check_references().
    """

    resource_name: ClassVar[str] = "Resource"
    entity_cls: ClassVar[Type[Any]]
    create_input: ClassVar[Type[BaseModel]]
    update_input: ClassVar[Type[BaseModel]]
    clearable_fields: ClassVar[FrozenSet[str]] = frozenset()

    def __init__(
        self,
        repository: OwnedResourceRepository[E],
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int | None = None,
    ) -> None:
        self._repository = repository
        self._default_limit = default_limit
        self._max_limit = max_limit

    # =========================================================================
    # Commands
    # =========================================================================
    def create(self, caller_id: UUID, data: InputPayload) -> ResourceResult[E]:
        # ---------------------------------------------------------------------
        # 1) Validar input.
        # ---------------------------------------------------------------------
        error, payload = validate_input(self.create_input, data)
        if error is not None:
            return ResourceResult(error=bad_request(error, self.resource_name))

        fields = payload.model_dump()

        # ---------------------------------------------------------------------
        # 2) Referencias: deben existir y ser del mismo dueño.
        # ---------------------------------------------------------------------
        ref_error = self._check_references(caller_id, fields)
        if ref_error is not None:
            return ResourceResult(error=ref_error)

        # ---------------------------------------------------------------------
        # 3) Construir entidad (dueño = caller) y persistir.
        # ---------------------------------------------------------------------
        created = self._repository.create(self._build(caller_id, fields))
        if created is None:
            return self._persistence_fault("create")

        logger.info(
            "Recurso creado",
            extra={"resource": self.resource_name, "resource_id": str(created.id)},
        )
        return ResourceResult(item=created)

    def update(
        self, caller_id: UUID, entity_id: UUID, data: InputPayload
    ) -> ResourceResult[E]:
        # ---------------------------------------------------------------------
        # 1) Validar input parcial.
        # ---------------------------------------------------------------------
        error, payload = validate_input(self.update_input, data)
        if error is not None:
            return ResourceResult(error=bad_request(error, self.resource_name))

        # ---------------------------------------------------------------------
        # 2) Guard de propiedad (inexistente == ajeno).
        # ---------------------------------------------------------------------
        current = self._load_owned(caller_id, entity_id)
        if current is None:
            return ResourceResult(error=not_found(self.resource_name))

        # ---------------------------------------------------------------------
        # 3) Merge: solo campos enviados + referencias válidas.
        # ---------------------------------------------------------------------
        changes = self._changes_from(payload)
        ref_error = self._check_references(caller_id, changes)
        if ref_error is not None:
            return ResourceResult(error=ref_error)

        if not changes:
            return ResourceResult(item=current)

        return self._apply_update(entity_id, changes)

    def delete(self, caller_id: UUID, entity_id: UUID) -> DeleteResult:
        if self._load_owned(caller_id, entity_id) is None:
            return DeleteResult(error=not_found(self.resource_name))

        deleted = self._repository.delete(entity_id)
        logger.info(
            "Recurso eliminado",
            extra={
                "resource": self.resource_name,
                "resource_id": str(entity_id),
                "deleted": deleted,
            },
        )
        return DeleteResult(deleted=deleted)

    # =========================================================================
    # Queries
    # =========================================================================
    def get(self, caller_id: UUID, entity_id: UUID) -> ResourceResult[E]:
        resource = self._load_owned(caller_id, entity_id)
        if resource is None:
            return ResourceResult(error=not_found(self.resource_name))
        return ResourceResult(item=resource)

    def list(
        self,
        caller_id: UUID,
        page: int | None = None,
        limit: int | None = None,
    ) -> ResourceListResult[E]:
        return self._list_where({"user_id": caller_id}, page, limit)

    def count(self, caller_id: UUID) -> CountResult:
        return CountResult(count=self._repository.count(filters={"user_id": caller_id}))

    # =========================================================================
    # Hooks / helpers para subclases
    # =========================================================================
    def _check_references(
        self, caller_id: UUID, fields: Mapping[str, Any]
    ) -> Optional[ServiceError]:
        """Valida referencias (por defecto: ninguna)."""
        return None

    def _build(self, caller_id: UUID, fields: Dict[str, Any]) -> E:
        return self.entity_cls(id=uuid4(), user_id=caller_id, **fields)

    def _load_owned(self, caller_id: UUID, entity_id: UUID) -> Optional[E]:
        return authorize(self._repository.get(entity_id), caller_id)

    def _changes_from(self, payload: BaseModel) -> Dict[str, Any]:
        """
        Campos enviados por el caller.

        Un null explícito solo se respeta en clearable_fields; en el resto se
        interpreta como "no cambiar".
        """
        return {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in self.clearable_fields
        }

    def _apply_update(
        self, entity_id: UUID, changes: Mapping[str, Any]
    ) -> ResourceResult[E]:
        updated = self._repository.update(entity_id, changes)
        if updated is None:
            return self._persistence_fault("update", entity_id)
        return ResourceResult(item=updated)

    def _owned_reference(
        self,
        repository: OwnedResourceRepository[Any],
        reference_id: UUID | None,
        caller_id: UUID,
        *,
        field: str,
        resource: str,
    ) -> Optional[ServiceError]:
        """
        BAD_REQUEST si la referencia no existe o es de otro usuario.

        Mismo mensaje en ambos casos (no se filtra existencia).
        """
        if reference_id is None:
            return None
        if authorize(repository.get(reference_id), caller_id) is None:
            return bad_request(f"{field}: {resource} not found", resource)
        return None

    def _resolve_page(
        self, page: int | None, limit: int | None
    ) -> tuple[Optional[str], Optional[PageRequest]]:
        return resolve_page(
            page, limit, default_limit=self._default_limit, max_limit=self._max_limit
        )

    def _list_where(
        self,
        filters: Mapping[str, Any],
        page: int | None,
        limit: int | None,
    ) -> ResourceListResult[E]:
        error, page_request = self._resolve_page(page, limit)
        if error is not None:
            return ResourceListResult(error=bad_request(error, self.resource_name))

        items = self._repository.list(
            filters=filters, offset=page_request.offset, limit=page_request.limit
        )
        return ResourceListResult(items=items)

    def _persistence_fault(
        self, operation: str, entity_id: UUID | None = None
    ) -> ResourceResult[E]:
        logger.error(
            "El store no devolvió registro",
            extra={
                "resource": self.resource_name,
                "operation": operation,
                "resource_id": str(entity_id) if entity_id else None,
            },
        )
        return ResourceResult(
            error=internal_error(
                f"{self.resource_name} could not be persisted", self.resource_name
            )
        )
