"""
Book endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from bookstore.api import deps
from bookstore.schemas.catalog.book import BookCreate, BookRead, BookUpdate
from bookstore.services.catalog.book_service import BookService
from bookstore.services.common.permissions import Roles

router = APIRouter(prefix="/books", tags=["Books"])

admin_only = deps.require_roles(Roles.ADMINISTRATOR)


@router.get("", response_model=List[BookRead], dependencies=[Depends(deps.get_current_principal)])
def list_books(
    author_id: Optional[int] = None,
    isbn: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: BookService = Depends(deps.get_book_service),
):
    filters = {"author_id": author_id, "isbn": isbn}
    return service.list(filters, skip=skip, limit=limit).unwrap()


@router.get("/{book_id}", response_model=BookRead, dependencies=[Depends(deps.get_current_principal)])
def get_book(book_id: int, service: BookService = Depends(deps.get_book_service)):
    return service.get(book_id).unwrap()


@router.post(
    "",
    response_model=BookRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(admin_only)],
)
def create_book(payload: BookCreate, service: BookService = Depends(deps.get_book_service)):
    return service.create(payload).unwrap()


@router.put("/{book_id}", response_model=BookRead, dependencies=[Depends(admin_only)])
def update_book(
    book_id: int,
    payload: BookUpdate,
    service: BookService = Depends(deps.get_book_service),
):
    return service.update(book_id, payload).unwrap()


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(admin_only)],
)
def delete_book(book_id: int, service: BookService = Depends(deps.get_book_service)):
    service.delete(book_id).unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
