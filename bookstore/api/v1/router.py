"""
API v1 Router - aggregates all v1 endpoints.
"""
from fastapi import APIRouter

from bookstore.api.v1 import authors, books, users
from bookstore.schemas.common.response import ErrorResponse

router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        403: {"model": ErrorResponse, "description": "Forbidden"},
        404: {"model": ErrorResponse, "description": "Not Found"},
        409: {"model": ErrorResponse, "description": "Conflict"},
        503: {"model": ErrorResponse, "description": "Store Unavailable"},
    }
)

router.include_router(users.router)
router.include_router(authors.router)
router.include_router(books.router)
