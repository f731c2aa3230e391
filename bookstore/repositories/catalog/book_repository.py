"""
Book Repository.
"""
from typing import Iterator, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookstore.models.base import BaseModel
from bookstore.models.book import Book
from bookstore.repositories.base.base_repository import GenericRepository


class BookRepository(GenericRepository[Book, int]):
    model = Book

    def __init__(self, db: Session, *, added: Optional[List[BaseModel]] = None):
        super().__init__(db, added=added)

    def find_by_isbn(self, isbn: str) -> Optional[Book]:
        with self._translate_errors("fetch"):
            return self.db.scalars(select(Book).where(Book.isbn == isbn)).first()

    def find_by_author(self, author_id: int) -> Iterator[Book]:
        return self.get_all(author_id=author_id)
