"""
Base schema classes with common configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseReadSchema",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    All application-facing schemas inherit from this so ORM objects can be
    validated directly and surrounding whitespace is dropped.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class BaseCreateSchema(BaseSchema):
    """
    Base schema for create operations.

    Unknown fields, including ``id``, are rejected: the store assigns keys.
    """

    model_config = ConfigDict(extra="forbid")


class BaseUpdateSchema(BaseSchema):
    """
    Base schema for full-replacement updates.

    Subclasses declare every mutable field; omitted optional fields are
    cleared.
    """

    model_config = ConfigDict(extra="forbid")


class BaseReadSchema(BaseSchema):
    """Base schema for responses of stored entities."""

    id: int = Field(..., description="Store-assigned identifier")
