"""
Compact representations used when one catalog entity is nested in another.
"""

from typing import Optional

from bookstore.schemas.common.base import BaseReadSchema


class AuthorBrief(BaseReadSchema):
    firstname: str
    lastname: str


class BookBrief(BaseReadSchema):
    title: str
    isbn: str
    year: Optional[int] = None
