"""
Identity store models.

Users and their role assignments back the credential check performed when
a token is issued. Nothing else in the application reads these tables.
"""
from typing import FrozenSet, List

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.db.base import Base
from bookstore.models.base import BaseModel


class User(BaseModel):
    """Registered account with a bcrypt password hash."""
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    roles: Mapped[List["UserRole"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def role_names(self) -> FrozenSet[str]:
        return frozenset(role.name for role in self.roles)


class UserRole(Base):
    """Role assignment; one row per (user, role)."""
    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    name: Mapped[str] = mapped_column(String(50), primary_key=True)

    user: Mapped[User] = relationship(back_populates="roles")
