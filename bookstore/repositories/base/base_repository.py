"""
Generic repository with standardized CRUD operations and error handling.

One instance is bound to one SQLAlchemy session, which belongs to the unit
of work that handed the repository out. Nothing here commits: mutations
join the session's transaction and become durable only when the unit of
work commits.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from bookstore.core.exceptions import (
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from bookstore.models.base import BaseModel

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)
KeyType = TypeVar("KeyType")


class GenericRepository(Generic[ModelType, KeyType]):
    """
    CRUD operations over one entity type.

    Subclasses pin ``model`` and may override the ``_check_*`` hooks to
    enforce relation invariants.
    """

    model: Type[ModelType]

    def __init__(
        self,
        db: Session,
        *,
        model: Optional[Type[ModelType]] = None,
        added: Optional[List[BaseModel]] = None,
    ):
        """
        Initialize repository.

        Args:
            db: Database session owned by the enclosing unit of work
            model: Entity class, required when the class does not pin one
            added: Shared list recording staged inserts in program order
        """
        if model is not None:
            self.model = model
        if getattr(self, "model", None) is None:
            raise TypeError(f"{type(self).__name__} needs an entity model")
        self.db = db
        self.added: List[BaseModel] = added if added is not None else []

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    # ==================== Create Operations ====================

    def add(self, entity: ModelType) -> ModelType:
        """
        Stage an entity for insertion.

        The store assigns the key when the session flushes, at the latest on
        commit.

        Raises:
            ValidationError: If a key was supplied or a required column is empty
        """
        if not isinstance(entity, self.model):
            raise ValidationError(
                f"Expected {self.entity_name}, got {type(entity).__name__}"
            )
        if entity.id is not None:
            raise ValidationError(
                f"{self.entity_name} identifier is assigned by the store",
                field="id",
            )
        self._check_required(entity)

        self.db.add(entity)
        self.added.append(entity)
        logger.debug(f"Staged new {self.entity_name}")
        return entity

    # ==================== Read Operations ====================

    def get_by_id(self, id: KeyType) -> Optional[ModelType]:
        """Return the entity or None. A missing row is not an error."""
        with self._translate_errors("fetch"):
            return self.db.get(self.model, id)

    def exists(self, id: KeyType) -> bool:
        return self.get_by_id(id) is not None

    def get_all(
        self,
        *predicates: ColumnElement[bool],
        order_by: Optional[List[str]] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> Iterator[ModelType]:
        """
        Lazily iterate over matching rows.

        The query runs on the first ``next()`` and the iterator cannot be
        restarted. With no arguments every row of the entity is produced.

        Args:
            *predicates: SQLAlchemy boolean expressions
            order_by: Column names, prefix with ``-`` for descending
            offset: Rows to skip
            limit: Maximum rows to produce
            **filters: Column equality filters

        Raises:
            ValidationError: If a filter or ordering names an unknown column
        """
        stmt = self._build_select(predicates, filters)

        for field in order_by or ["id"]:
            column = self._column(field.lstrip("-"))
            stmt = stmt.order_by(column.desc() if field.startswith("-") else column)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        return self._iterate(stmt)

    def count(self, *predicates: ColumnElement[bool], **filters: Any) -> int:
        stmt = self._build_select(predicates, filters)
        with self._translate_errors("count"):
            return self.db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

    # ==================== Update Operations ====================

    def update(self, entity: ModelType) -> None:
        """
        Overwrite every mutable column of the stored row with ``entity``'s values.

        Last writer wins; there is no version check.

        Raises:
            NotFoundError: If no row has ``entity.id``
        """
        if entity.id is None:
            raise NotFoundError(self.entity_name, None)

        current = self.get_by_id(entity.id)
        if current is None:
            raise NotFoundError(self.entity_name, entity.id)

        if current is not entity:
            for column in self.model.__table__.columns:
                if not column.primary_key:
                    setattr(current, column.key, getattr(entity, column.key))

        self._check_required(current)
        self._check_update(current)
        self._flush("update")
        logger.debug(f"Updated {self.entity_name} with id: {entity.id}")

    # ==================== Delete Operations ====================

    def remove(self, id: KeyType) -> None:
        """
        Delete a row. Dependent rows are never cascaded.

        Raises:
            NotFoundError: If the row does not exist
            ConflictError: If other rows still reference it
        """
        entity = self.get_by_id(id)
        if entity is None:
            raise NotFoundError(self.entity_name, id)

        self._check_remove(entity)
        self.db.delete(entity)
        self._flush("remove")
        logger.debug(f"Removed {self.entity_name} with id: {id}")

    # ==================== Hooks ====================

    def _check_update(self, entity: ModelType) -> None:
        """Override to enforce invariants before an update is flushed."""

    def _check_remove(self, entity: ModelType) -> None:
        """Override to reject removals that would break a relation."""

    # ==================== Helpers ====================

    def _check_required(self, entity: ModelType) -> None:
        for column in self.model.__table__.columns:
            if column.primary_key or column.nullable:
                continue
            if column.default is not None or column.server_default is not None:
                continue
            value = getattr(entity, column.key)
            if value is None and column.foreign_keys and self._set_through_relation(entity, column):
                continue
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(
                    f"{self.entity_name}.{column.key} is required",
                    field=column.key,
                )

    def _set_through_relation(self, entity: ModelType, column) -> bool:
        # Book(author=author) fills author_id only at flush time
        for relation in sa_inspect(self.model).relationships:
            if column in relation.local_columns and getattr(entity, relation.key) is not None:
                return True
        return False

    def _column(self, name: str):
        if name not in self.model.__table__.columns:
            raise ValidationError(
                f"{self.entity_name} has no field '{name}'",
                field=name,
            )
        return getattr(self.model, name)

    def _build_select(self, predicates, filters: Dict[str, Any]):
        stmt = select(self.model)
        for key, value in filters.items():
            column = self._column(key)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        for predicate in predicates:
            stmt = stmt.where(predicate)
        return stmt

    def _iterate(self, stmt) -> Iterator[ModelType]:
        with self._translate_errors("list"):
            result = self.db.scalars(stmt)
        yield from result

    def _flush(self, operation: str) -> None:
        with self._translate_errors(operation):
            self.db.flush()

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            logger.warning(f"{operation} on {self.entity_name} violated a constraint: {e.orig}")
            raise ConflictError(
                f"{operation.capitalize()} of {self.entity_name} violates a relation constraint",
                details={"entity": self.entity_name},
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"{operation} on {self.entity_name} failed: {e}")
            raise StoreError(f"{operation.capitalize()} of {self.entity_name} failed", e) from e
