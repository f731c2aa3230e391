"""
Author schemas.
"""

from typing import List, Optional

from pydantic import Field

from bookstore.schemas.catalog.brief import BookBrief
from bookstore.schemas.common.base import (
    BaseCreateSchema,
    BaseReadSchema,
    BaseUpdateSchema,
)

__all__ = ["AuthorCreate", "AuthorUpdate", "AuthorRead"]


class AuthorCreate(BaseCreateSchema):
    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=250)


class AuthorUpdate(BaseUpdateSchema):
    """Replaces every field of the author."""

    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=250)


class AuthorRead(BaseReadSchema):
    firstname: str
    lastname: str
    bio: Optional[str] = None
    books: List[BookBrief] = Field(default_factory=list)
