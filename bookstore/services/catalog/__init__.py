from bookstore.services.catalog.author_service import AuthorService
from bookstore.services.catalog.book_service import BookService

__all__ = ["AuthorService", "BookService"]
