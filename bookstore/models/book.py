"""
Book model.
"""
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.models.base import BaseModel

if TYPE_CHECKING:
    from bookstore.models.author import Author


class Book(BaseModel):
    """Book record referencing exactly one author."""
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("price IS NULL OR price >= 0", name="ck_books_price_non_negative"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    isbn: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    summary: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    author: Mapped["Author"] = relationship(back_populates="books")
