"""
Standard API response wrappers.
"""

from typing import Any, Dict

from pydantic import Field

from bookstore.schemas.common.base import BaseSchema

__all__ = ["ErrorBody", "ErrorResponse", "HealthResponse"]


class ErrorBody(BaseSchema):
    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseSchema):
    """Body of every error produced by the application."""

    error: ErrorBody


class HealthResponse(BaseSchema):
    status: str = Field(default="ok")
    app: str
    version: str
    api_version: str
    environment: str
