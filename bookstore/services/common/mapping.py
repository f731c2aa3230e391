"""
Model-Schema mapping utilities.

Converts ORM models to Pydantic schemas while the owning session is still
open, so lazy relations resolve before the unit of work closes.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from bookstore.core.exceptions import BookStoreError, ErrorCode

TModel = TypeVar("TModel")
TSchema = TypeVar("TSchema", bound=BaseModel)


class MappingError(BookStoreError):
    """Raised when model-to-schema conversion fails."""

    def __init__(self, message: str, source_obj: Any = None) -> None:
        super().__init__(
            message,
            ErrorCode.INTERNAL_ERROR,
            {"source_type": type(source_obj).__name__},
        )
        self.source_obj = source_obj


def to_schema(obj: TModel, schema_cls: Type[TSchema]) -> TSchema:
    """
    Convert an ORM model to a Pydantic schema.

    Raises:
        MappingError: If obj is None or does not satisfy the schema

    Example:
        >>> author = to_schema(db_author, AuthorRead)
    """
    if obj is None:
        raise MappingError(f"Cannot convert None to {schema_cls.__name__}", source_obj=obj)

    try:
        return schema_cls.model_validate(obj)
    except ValidationError as exc:
        raise MappingError(
            f"Failed to convert {type(obj).__name__} to {schema_cls.__name__}: {exc}",
            source_obj=obj,
        ) from exc


def to_schema_list(objs: Iterable[TModel], schema_cls: Type[TSchema]) -> List[TSchema]:
    """Convert an iterable of ORM models to a list of Pydantic schemas."""
    return [to_schema(obj, schema_cls) for obj in objs]
