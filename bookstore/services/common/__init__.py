"""
Common service infrastructure: unit of work, security, permissions and mapping.
"""

from bookstore.services.common.mapping import MappingError, to_schema, to_schema_list
from bookstore.services.common.permissions import Principal, Roles
from bookstore.services.common.security import (
    JWTSettings,
    PasswordHasher,
    create_access_token,
    decode_signed_claims,
)
from bookstore.services.common.unit_of_work import UnitOfWork

__all__ = [
    "UnitOfWork",
    "JWTSettings",
    "PasswordHasher",
    "create_access_token",
    "decode_signed_claims",
    "Principal",
    "Roles",
    "MappingError",
    "to_schema",
    "to_schema_list",
]
