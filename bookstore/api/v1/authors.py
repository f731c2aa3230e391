"""
Author endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from bookstore.api import deps
from bookstore.schemas.catalog.author import AuthorCreate, AuthorRead, AuthorUpdate
from bookstore.services.catalog.author_service import AuthorService
from bookstore.services.common.permissions import Roles

router = APIRouter(prefix="/authors", tags=["Authors"])

admin_only = deps.require_roles(Roles.ADMINISTRATOR)


@router.get("", response_model=List[AuthorRead], dependencies=[Depends(deps.get_current_principal)])
def list_authors(
    lastname: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: AuthorService = Depends(deps.get_author_service),
):
    return service.list({"lastname": lastname}, skip=skip, limit=limit).unwrap()


@router.get("/{author_id}", response_model=AuthorRead, dependencies=[Depends(deps.get_current_principal)])
def get_author(author_id: int, service: AuthorService = Depends(deps.get_author_service)):
    return service.get(author_id).unwrap()


@router.post(
    "",
    response_model=AuthorRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(admin_only)],
)
def create_author(payload: AuthorCreate, service: AuthorService = Depends(deps.get_author_service)):
    return service.create(payload).unwrap()


@router.put("/{author_id}", response_model=AuthorRead, dependencies=[Depends(admin_only)])
def update_author(
    author_id: int,
    payload: AuthorUpdate,
    service: AuthorService = Depends(deps.get_author_service),
):
    return service.update(author_id, payload).unwrap()


@router.delete(
    "/{author_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(admin_only)],
)
def delete_author(author_id: int, service: AuthorService = Depends(deps.get_author_service)):
    service.delete(author_id).unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
