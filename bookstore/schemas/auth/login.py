"""
Account schemas for registration and login.
"""

from typing import List

from pydantic import EmailStr, Field, field_validator

from bookstore.schemas.common.base import BaseReadSchema, BaseSchema

__all__ = ["LoginRequest", "RegisterRequest", "UserRead"]


class LoginRequest(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class RegisterRequest(LoginRequest):
    password: str = Field(..., min_length=6, max_length=128)


class UserRead(BaseReadSchema):
    email: str
    roles: List[str]
    is_active: bool = True
