"""
User Repository - accounts and role assignments for the identity store.
"""
from typing import Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookstore.models.base import BaseModel
from bookstore.models.user import User, UserRole
from bookstore.repositories.base.base_repository import GenericRepository


class UserRepository(GenericRepository[User, int]):
    model = User

    def __init__(self, db: Session, *, added: Optional[List[BaseModel]] = None):
        super().__init__(db, added=added)

    def find_by_email(self, email: str) -> Optional[User]:
        """
        Find user by email address (compared case-insensitively).

        Args:
            email: Email address to search

        Returns:
            User entity or None
        """
        with self._translate_errors("fetch"):
            return self.db.scalars(
                select(User).where(func.lower(User.email) == email.strip().lower())
            ).first()

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def assign_roles(self, user: User, roles: Iterable[str]) -> None:
        """Add missing role rows; existing assignments are kept."""
        current = user.role_names
        for name in roles:
            if name not in current:
                user.roles.append(UserRole(name=name))
