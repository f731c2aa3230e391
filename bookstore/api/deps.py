"""
Route dependencies.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from bookstore.api import deps

    @router.get("/")
    def list_things(principal: Principal = Depends(deps.get_current_principal)):
        ...
"""

from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bookstore.container import AppContainer
from bookstore.services.auth.auth_gateway import AuthGateway
from bookstore.services.catalog.author_service import AuthorService
from bookstore.services.catalog.book_service import BookService
from bookstore.services.common.permissions import Principal

# auto_error=False so a missing header reaches the gateway and gets the
# application's error body.
bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def get_gateway(container: AppContainer = Depends(get_container)) -> AuthGateway:
    return container.gateway


def get_author_service(container: AppContainer = Depends(get_container)) -> AuthorService:
    return container.authors


def get_book_service(container: AppContainer = Depends(get_container)) -> BookService:
    return container.books


def _authorization_header(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return request.headers.get("Authorization")


def require_roles(*roles: str) -> Callable[..., Principal]:
    """
    Dependency that admits callers holding any of ``roles``.

    With no roles any authenticated caller is admitted. Rejections raise
    AuthError (401) or ForbiddenError (403) before the route body runs.
    """

    def dependency(
        authorization: Optional[str] = Depends(_authorization_header),
        gateway: AuthGateway = Depends(get_gateway),
    ) -> Principal:
        return gateway.gate(authorization, roles).require()

    return dependency


get_current_principal = require_roles()
