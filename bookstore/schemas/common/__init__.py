from bookstore.schemas.common.base import (
    BaseCreateSchema,
    BaseReadSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from bookstore.schemas.common.response import ErrorBody, ErrorResponse, HealthResponse

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseReadSchema",
    "ErrorBody",
    "ErrorResponse",
    "HealthResponse",
]
