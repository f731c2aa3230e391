"""
Token response schema.
"""

from datetime import datetime
from typing import List

from pydantic import Field

from bookstore.schemas.common.base import BaseSchema

__all__ = ["TokenResponse"]


class TokenResponse(BaseSchema):
    access_token: str
    token_type: str = Field(default="bearer")
    expires_at: datetime
    roles: List[str] = Field(default_factory=list)
