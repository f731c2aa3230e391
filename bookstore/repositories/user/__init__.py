"""
User repositories package.
"""

from bookstore.repositories.user.user_repository import UserRepository

__all__ = ["UserRepository"]
