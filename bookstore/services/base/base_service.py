"""
Generic service providing CRUD for one entity type.

Each operation validates its input, opens its own unit of work, and maps
the result to a read schema before the scope closes.
"""

from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel as PydanticModel
from pydantic import ValidationError as PydanticValidationError

from bookstore.core.exceptions import BookStoreError, NotFoundError, ValidationError
from bookstore.core.logging import get_logger
from bookstore.models.base import BaseModel
from bookstore.services.base.service_result import ServiceResult
from bookstore.services.common.mapping import to_schema, to_schema_list
from bookstore.services.common.unit_of_work import UnitOfWork

TModel = TypeVar("TModel", bound=BaseModel)
TCreate = TypeVar("TCreate", bound=PydanticModel)
TUpdate = TypeVar("TUpdate", bound=PydanticModel)
TRead = TypeVar("TRead", bound=PydanticModel)

Payload = Union[PydanticModel, Mapping[str, Any]]

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 500


class GenericService(Generic[TModel, TCreate, TUpdate, TRead]):
    """
    Base service with common behaviors:
    - Input shape validation before any store access
    - One unit of work per operation
    - Domain errors carried unchanged in a ServiceResult
    - Referential check hook for writes
    """

    model: Type[TModel]
    create_schema: Type[TCreate]
    update_schema: Type[TUpdate]
    read_schema: Type[TRead]

    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        """
        Initialize service.

        Args:
            uow_factory: Returns a fresh, unopened UnitOfWork
        """
        self.uow_factory = uow_factory
        self._logger = get_logger(self.__class__.__name__)

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    # -------------------------------------------------------------------------
    # CRUD Operations
    # -------------------------------------------------------------------------

    def create(self, payload: Payload) -> ServiceResult[TRead]:
        """
        Validate and persist a new entity.

        Returns:
            ServiceResult containing the stored entity with its key
        """
        try:
            data = self._validate(self.create_schema, payload)
            with self.uow_factory() as uow:
                self._before_write(uow, data)
                repo = uow.repository(self.model)
                entity = repo.add(self.model(**data))
                uow.flush()
                result = to_schema(entity, self.read_schema)
                uow.commit()
        except BookStoreError as e:
            return self._failure(e, "create")

        self._logger.info(f"{self.entity_name} created", entity_id=result.id)
        return ServiceResult.success(result, message=f"{self.entity_name} created")

    def get(self, entity_id: Any) -> ServiceResult[TRead]:
        try:
            with self.uow_factory() as uow:
                entity = uow.repository(self.model).get_by_id(entity_id)
                if entity is None:
                    raise NotFoundError(self.entity_name, entity_id)
                result = to_schema(entity, self.read_schema)
        except BookStoreError as e:
            return self._failure(e, "get", entity_id)
        return ServiceResult.success(result)

    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        skip: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> ServiceResult[List[TRead]]:
        """
        List entities matching column-equality ``filters``.

        Args:
            filters: Column name to value; None values are ignored
            skip: Rows to skip
            limit: Page size, capped at MAX_PAGE_SIZE
        """
        try:
            if skip < 0 or limit < 1:
                raise ValidationError("skip must be >= 0 and limit >= 1")
            criteria = {k: v for k, v in (filters or {}).items() if v is not None}
            with self.uow_factory() as uow:
                rows = uow.repository(self.model).get_all(
                    offset=skip,
                    limit=min(limit, MAX_PAGE_SIZE),
                    **criteria,
                )
                result = to_schema_list(rows, self.read_schema)
        except BookStoreError as e:
            return self._failure(e, "list")
        return ServiceResult.success(result, metadata={"skip": skip, "count": len(result)})

    def update(self, entity_id: Any, payload: Payload) -> ServiceResult[TRead]:
        """Replace every mutable field of an existing entity."""
        try:
            data = self._validate(self.update_schema, payload)
            with self.uow_factory() as uow:
                repo = uow.repository(self.model)
                if not repo.exists(entity_id):
                    raise NotFoundError(self.entity_name, entity_id)
                self._before_write(uow, data)
                replacement = self.model(**data)
                replacement.id = entity_id
                repo.update(replacement)
                result = to_schema(repo.get_by_id(entity_id), self.read_schema)
                uow.commit()
        except BookStoreError as e:
            return self._failure(e, "update", entity_id)

        self._logger.info(f"{self.entity_name} updated", entity_id=entity_id)
        return ServiceResult.success(result, message=f"{self.entity_name} updated")

    def delete(self, entity_id: Any) -> ServiceResult[bool]:
        try:
            with self.uow_factory() as uow:
                uow.repository(self.model).remove(entity_id)
                uow.commit()
        except BookStoreError as e:
            return self._failure(e, "delete", entity_id)

        self._logger.info(f"{self.entity_name} deleted", entity_id=entity_id)
        return ServiceResult.success(True, message=f"{self.entity_name} deleted")

    # -------------------------------------------------------------------------
    # Hooks (Override in subclasses)
    # -------------------------------------------------------------------------

    def _before_write(self, uow: UnitOfWork, data: Dict[str, Any]) -> None:
        """
        Hook for referential checks before create or update.

        Raise a BookStoreError to abort; the unit of work rolls back.
        """

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _validate(self, schema: Type[PydanticModel], payload: Payload) -> Dict[str, Any]:
        if isinstance(payload, schema):
            return payload.model_dump()
        if isinstance(payload, PydanticModel):
            payload = payload.model_dump()
        try:
            return schema.model_validate(payload).model_dump()
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise ValidationError(
                f"Invalid {self.entity_name}: {first['msg']}",
                field=field,
                details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
            ) from e

    def _failure(
        self,
        error: BookStoreError,
        operation: str,
        entity_ref: Optional[Any] = None,
    ) -> ServiceResult:
        self._logger.warning(
            f"{operation} {self.entity_name} failed",
            error_code=error.error_code.value,
            entity_ref=entity_ref,
            reason=error.message,
        )
        return ServiceResult.failure(error)
