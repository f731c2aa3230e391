"""
Authentication gateway.

Issues bearer tokens for valid credentials and decides, for every request,
whether the presented token is trusted and carries the required role.

A request moves UNAUTHENTICATED -> TOKEN_PRESENTED -> VALIDATED -> AUTHORIZED,
or ends in REJECTED at the first failed step.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional, Protocol

from jose import JWTError

from bookstore.core.exceptions import AuthError, AuthErrorKind, BookStoreError, ForbiddenError
from bookstore.core.logging import get_logger
from bookstore.services.auth.identity_store import IdentityStore
from bookstore.services.common.permissions import Principal
from bookstore.services.common.security import (
    JWTSettings,
    create_access_token,
    decode_signed_claims,
)

logger = get_logger(__name__)

BEARER_SCHEME = "bearer"


class TrustLevel(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    TOKEN_PRESENTED = "token_presented"
    VALIDATED = "validated"
    AUTHORIZED = "authorized"
    REJECTED = "rejected"


class Credentials(Protocol):
    email: str
    password: str


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    expires_at: datetime
    principal: Principal
    token_type: str = BEARER_SCHEME


@dataclass(frozen=True)
class RequestTrust:
    """Outcome of gating one request."""

    level: TrustLevel
    principal: Optional[Principal] = None
    error: Optional[BookStoreError] = None
    # Last level passed before the outcome
    reached: TrustLevel = TrustLevel.UNAUTHENTICATED

    @property
    def is_authorized(self) -> bool:
        return self.level is TrustLevel.AUTHORIZED

    def require(self) -> Principal:
        """Return the principal or raise the rejection error."""
        if self.error is not None:
            raise self.error
        return self.principal


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthGateway:
    """
    Token issue, validation and role checks.

    Args:
        jwt_settings: Immutable signing and validation settings
        identity_store: Credential verification backend
        clock: Returns the current aware UTC time; injectable for tests
    """

    def __init__(
        self,
        jwt_settings: JWTSettings,
        identity_store: IdentityStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.jwt_settings = jwt_settings
        self.identity_store = identity_store
        self.clock = clock or _utcnow

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue_token(self, credentials: Credentials) -> IssuedToken:
        """
        Verify credentials and mint an access token.

        Raises:
            AuthError: INVALID_CREDENTIALS for an unknown email, a wrong
                password or an inactive account
        """
        principal = self.identity_store.verify_credentials(
            credentials.email, credentials.password
        )
        if principal is None:
            logger.warning("Login rejected", reason=AuthErrorKind.INVALID_CREDENTIALS.value)
            raise AuthError(AuthErrorKind.INVALID_CREDENTIALS)

        token, expires_at = create_access_token(
            self.jwt_settings,
            subject=principal.user_id,
            roles=principal.roles,
            email=principal.email,
            now=self.clock(),
        )
        logger.info("Token issued", user_id=principal.user_id)
        return IssuedToken(access_token=token, expires_at=expires_at, principal=principal)

    # ------------------------------------------------------------------ #
    # Validate
    # ------------------------------------------------------------------ #

    def authenticate(self, token: str) -> Principal:
        """
        Validate a token and return its principal.

        Checks run in a fixed order and stop at the first failure:
        signature, issuer, audience, expiry, then claim shape.

        Raises:
            AuthError: With the kind of the first failed check
        """
        try:
            claims = decode_signed_claims(self.jwt_settings, token)
        except JWTError as e:
            logger.info("Token rejected", reason=AuthErrorKind.BAD_SIGNATURE.value, detail=str(e))
            raise AuthError(AuthErrorKind.BAD_SIGNATURE) from e

        if claims.get("iss") != self.jwt_settings.issuer:
            raise self._reject(AuthErrorKind.WRONG_ISSUER)

        if not self._audience_matches(claims.get("aud")):
            raise self._reject(AuthErrorKind.WRONG_AUDIENCE)

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise self._reject(AuthErrorKind.MALFORMED)
        if self.clock().timestamp() >= exp:
            raise self._reject(AuthErrorKind.EXPIRED)

        return self._principal_from_claims(claims)

    def authorize(self, principal: Principal, required_role: str) -> bool:
        return principal.has_role(required_role)

    @staticmethod
    def parse_bearer(authorization: Optional[str]) -> str:
        """
        Extract the token from an ``Authorization: Bearer <token>`` header.

        Raises:
            AuthError: MISSING_TOKEN for an absent or ill-formed header
        """
        if not authorization:
            raise AuthError(AuthErrorKind.MISSING_TOKEN)
        scheme, _, token = authorization.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != BEARER_SCHEME or not token or " " in token:
            raise AuthError(AuthErrorKind.MISSING_TOKEN)
        return token

    # ------------------------------------------------------------------ #
    # Request gate
    # ------------------------------------------------------------------ #

    def gate(
        self,
        authorization: Optional[str],
        required_roles: Iterable[str] = (),
    ) -> RequestTrust:
        """
        Walk one request through the trust levels.

        With ``required_roles`` the principal needs at least one of them;
        without, any valid token is enough.
        """
        reached = TrustLevel.UNAUTHENTICATED
        try:
            token = self.parse_bearer(authorization)
            reached = TrustLevel.TOKEN_PRESENTED
            principal = self.authenticate(token)
        except AuthError as e:
            return RequestTrust(TrustLevel.REJECTED, error=e, reached=reached)

        roles: FrozenSet[str] = frozenset(required_roles)
        if roles and not any(self.authorize(principal, role) for role in roles):
            logger.warning("Role check failed", user_id=principal.user_id, required=sorted(roles))
            return RequestTrust(
                TrustLevel.REJECTED,
                principal=principal,
                error=ForbiddenError(" or ".join(sorted(roles))),
                reached=TrustLevel.VALIDATED,
            )

        return RequestTrust(TrustLevel.AUTHORIZED, principal=principal, reached=TrustLevel.AUTHORIZED)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _audience_matches(self, aud: Any) -> bool:
        if isinstance(aud, str):
            return aud == self.jwt_settings.audience
        if isinstance(aud, (list, tuple)):
            return self.jwt_settings.audience in aud
        return False

    def _principal_from_claims(self, claims: Dict[str, Any]) -> Principal:
        subject = claims.get("sub")
        roles = claims.get("roles", [])
        if not isinstance(subject, str) or not subject:
            raise self._reject(AuthErrorKind.MALFORMED)
        if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
            raise self._reject(AuthErrorKind.MALFORMED)

        email = claims.get("email")
        return Principal(
            user_id=subject,
            roles=frozenset(roles),
            email=email if isinstance(email, str) else None,
        )

    @staticmethod
    def _reject(kind: AuthErrorKind) -> AuthError:
        logger.info("Token rejected", reason=kind.value)
        return AuthError(kind)
