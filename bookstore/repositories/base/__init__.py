"""
Base repositories package.

Provides the generic repository every entity repository derives from.
"""

from bookstore.repositories.base.base_repository import (
    GenericRepository,
    KeyType,
    ModelType,
)

__all__ = ["GenericRepository", "ModelType", "KeyType"]
