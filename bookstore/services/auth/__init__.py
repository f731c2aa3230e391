from bookstore.services.auth.auth_gateway import (
    AuthGateway,
    IssuedToken,
    RequestTrust,
    TrustLevel,
)
from bookstore.services.auth.identity_store import IdentityStore, SqlIdentityStore

__all__ = [
    "AuthGateway",
    "IssuedToken",
    "RequestTrust",
    "TrustLevel",
    "IdentityStore",
    "SqlIdentityStore",
]
