"""
Book schemas.
"""

from typing import Optional

from pydantic import Field

from bookstore.schemas.catalog.brief import AuthorBrief
from bookstore.schemas.common.base import (
    BaseCreateSchema,
    BaseReadSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = ["BookCreate", "BookUpdate", "BookRead"]


class _BookFields(BaseSchema):
    title: str = Field(..., min_length=1, max_length=200)
    year: Optional[int] = Field(default=None, ge=0, le=9999)
    isbn: str = Field(..., min_length=1, max_length=20)
    summary: Optional[str] = Field(default=None, max_length=500)
    image: Optional[str] = Field(default=None, max_length=150)
    price: Optional[float] = Field(default=None, ge=0)
    author_id: int = Field(..., gt=0)


class BookCreate(BaseCreateSchema, _BookFields):
    pass


class BookUpdate(BaseUpdateSchema, _BookFields):
    """Replaces every field of the book."""


class BookRead(BaseReadSchema):
    title: str
    year: Optional[int] = None
    isbn: str
    summary: Optional[str] = None
    image: Optional[str] = None
    price: Optional[float] = None
    author_id: int
    author: Optional[AuthorBrief] = None
