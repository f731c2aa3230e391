"""
Repository layer.

``REPOSITORY_REGISTRY`` maps each entity class to the repository a unit of
work hands out for it. Entities without an entry get a plain
``GenericRepository``.
"""

from typing import Dict, Type

from bookstore.models import Author, Book, User
from bookstore.models.base import BaseModel
from bookstore.repositories.base import GenericRepository
from bookstore.repositories.catalog import AuthorRepository, BookRepository
from bookstore.repositories.user import UserRepository

REPOSITORY_REGISTRY: Dict[Type[BaseModel], Type[GenericRepository]] = {
    Author: AuthorRepository,
    Book: BookRepository,
    User: UserRepository,
}

__all__ = [
    "GenericRepository",
    "AuthorRepository",
    "BookRepository",
    "UserRepository",
    "REPOSITORY_REGISTRY",
]
