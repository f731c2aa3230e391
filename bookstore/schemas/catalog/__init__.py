from bookstore.schemas.catalog.author import AuthorCreate, AuthorRead, AuthorUpdate
from bookstore.schemas.catalog.book import BookCreate, BookRead, BookUpdate
from bookstore.schemas.catalog.brief import AuthorBrief, BookBrief

__all__ = [
    "AuthorCreate",
    "AuthorUpdate",
    "AuthorRead",
    "AuthorBrief",
    "BookCreate",
    "BookUpdate",
    "BookRead",
    "BookBrief",
]
