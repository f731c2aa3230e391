"""
Catalog repositories: authors and books.
"""

from bookstore.repositories.catalog.author_repository import AuthorRepository
from bookstore.repositories.catalog.book_repository import BookRepository

__all__ = ["AuthorRepository", "BookRepository"]
