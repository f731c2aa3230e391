"""
Base model configuration for SQLAlchemy ORM.

Provides the abstract base every persisted entity derives from.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.db.base import Base


class BaseModel(Base):
    """
    Abstract base model with an integer primary key.

    The key is generated by the store and never changes afterwards.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    def to_dict(self, exclude: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Convert model instance to a dictionary of column values.

        Args:
            exclude: List of column names to leave out
        """
        exclude = exclude or []
        return {
            column.key: getattr(self, column.key)
            for column in self.__table__.columns
            if column.key not in exclude
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"
