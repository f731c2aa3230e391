from bookstore.schemas.auth.login import LoginRequest, RegisterRequest, UserRead
from bookstore.schemas.auth.token import TokenResponse

__all__ = ["LoginRequest", "RegisterRequest", "UserRead", "TokenResponse"]
