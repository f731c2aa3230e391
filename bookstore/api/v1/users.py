"""
Account endpoints: registration and login. Both are public.
"""
from fastapi import APIRouter, Depends, status

from bookstore.api import deps
from bookstore.container import AppContainer
from bookstore.schemas.auth.login import LoginRequest, RegisterRequest, UserRead
from bookstore.schemas.auth.token import TokenResponse
from bookstore.services.auth.auth_gateway import AuthGateway

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, container: AppContainer = Depends(deps.get_container)):
    return container.identity_store.register(payload.email, payload.password)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, gateway: AuthGateway = Depends(deps.get_gateway)):
    issued = gateway.issue_token(payload)
    return TokenResponse(
        access_token=issued.access_token,
        token_type=issued.token_type,
        expires_at=issued.expires_at,
        roles=sorted(issued.principal.roles),
    )
