"""
Author model.
"""
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.models.base import BaseModel

if TYPE_CHECKING:
    from bookstore.models.book import Book


class Author(BaseModel):
    """
    Book author.

    Owns no rows: books hold the foreign key, and an author that still has
    books cannot be deleted.
    """
    __tablename__ = "authors"

    firstname: Mapped[str] = mapped_column(String(100), nullable=False)
    lastname: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    bio: Mapped[Optional[str]] = mapped_column(String(250), nullable=True)

    # passive_deletes="all" keeps SQLAlchemy from nulling book.author_id;
    # the delete has to be rejected instead.
    books: Mapped[List["Book"]] = relationship(
        back_populates="author",
        passive_deletes="all",
        order_by="Book.id",
    )
