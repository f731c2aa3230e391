"""
Author service.

Removal of an author that still has books is rejected by
AuthorRepository, so no extra checks are needed here.
"""

from bookstore.models.author import Author
from bookstore.schemas.catalog.author import AuthorCreate, AuthorRead, AuthorUpdate
from bookstore.services.base.base_service import GenericService


class AuthorService(GenericService[Author, AuthorCreate, AuthorUpdate, AuthorRead]):
    model = Author
    create_schema = AuthorCreate
    update_schema = AuthorUpdate
    read_schema = AuthorRead
