"""
Book service.
"""

from typing import Any, Dict

from bookstore.core.exceptions import ValidationError
from bookstore.models.author import Author
from bookstore.models.book import Book
from bookstore.schemas.catalog.book import BookCreate, BookRead, BookUpdate
from bookstore.services.base.base_service import GenericService
from bookstore.services.common.unit_of_work import UnitOfWork


class BookService(GenericService[Book, BookCreate, BookUpdate, BookRead]):
    """Books must reference an existing author."""

    model = Book
    create_schema = BookCreate
    update_schema = BookUpdate
    read_schema = BookRead

    def _before_write(self, uow: UnitOfWork, data: Dict[str, Any]) -> None:
        author_id = data.get("author_id")
        if not uow.repository(Author).exists(author_id):
            raise ValidationError(
                f"Author with identifier '{author_id}' does not exist",
                field="author_id",
            )
