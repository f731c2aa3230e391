"""
Author Repository - authors and the books that reference them.
"""
from typing import Iterator, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookstore.core.exceptions import ConflictError
from bookstore.models.author import Author
from bookstore.models.base import BaseModel
from bookstore.models.book import Book
from bookstore.repositories.base.base_repository import GenericRepository


class AuthorRepository(GenericRepository[Author, int]):
    """Authors can only be removed once no book references them."""

    model = Author

    def __init__(self, db: Session, *, added: Optional[List[BaseModel]] = None):
        super().__init__(db, added=added)

    def book_count(self, author_id: int) -> int:
        with self._translate_errors("count books of"):
            return self.db.scalar(
                select(func.count(Book.id)).where(Book.author_id == author_id)
            ) or 0

    def find_by_lastname(self, lastname: str) -> Iterator[Author]:
        """Case-insensitive lookup by last name."""
        return self.get_all(func.lower(Author.lastname) == lastname.lower())

    def _check_remove(self, entity: Author) -> None:
        books = self.book_count(entity.id)
        if books:
            raise ConflictError(
                f"Author {entity.id} still has {books} book(s)",
                details={"author_id": entity.id, "book_count": books},
            )
