"""
Database models.
"""

from bookstore.models.base import BaseModel
from bookstore.models.author import Author
from bookstore.models.book import Book
from bookstore.models.user import User, UserRole

__all__ = ["BaseModel", "Author", "Book", "User", "UserRole"]
