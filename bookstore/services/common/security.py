"""
Security utilities for authentication.

Provides password hashing with bcrypt and JWT encoding with python-jose.
Claim validation lives in the auth gateway; this module only signs and
checks signatures.
"""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional
from uuid import uuid4

import bcrypt
from jose import jwt

from bookstore.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------ #
# Configuration
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class JWTSettings:
    """
    JWT configuration settings, built once by the composition root.

    Example:
        >>> jwt_settings = JWTSettings(
        ...     secret_key=settings.JWT_SECRET_KEY,
        ...     algorithm="HS256",
        ...     access_token_expires_minutes=60,
        ...     issuer="bookstore-api",
        ...     audience="bookstore-api",
        ... )
    """
    secret_key: str
    issuer: str
    audience: str
    algorithm: str = "HS256"
    access_token_expires_minutes: int = 60

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not self.secret_key:
            raise ValueError("JWT secret_key cannot be empty")
        if not self.issuer or not self.audience:
            raise ValueError("JWT issuer and audience are required")
        if self.access_token_expires_minutes <= 0:
            raise ValueError("access_token_expires_minutes must be positive")

    @classmethod
    def from_settings(cls, settings: Any) -> "JWTSettings":
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            algorithm=settings.JWT_ALGORITHM,
            access_token_expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )


# ------------------------------------------------------------------ #
# Password hashing
# ------------------------------------------------------------------ #

def _prepare_password_for_bcrypt(password: str) -> bytes:
    """
    Prepare a password for bcrypt by handling the 72-byte limit.

    Passwords longer than the limit are replaced by their SHA-256 hex
    digest, which always fits.
    """
    encoded = password.encode("utf-8")
    if len(encoded) > 71:
        return hashlib.sha256(encoded).hexdigest().encode("ascii")
    return encoded


class PasswordHasher:
    """
    Handle password hashing and verification using bcrypt.

    Uses bcrypt with configurable rounds for computational cost.
    """

    DEFAULT_ROUNDS = 12
    MIN_ROUNDS = 4
    MAX_ROUNDS = 31

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        """
        Initialize password hasher.

        Args:
            rounds: Number of bcrypt rounds (4-31, default 12)

        Raises:
            ValueError: If rounds is outside valid range
        """
        if not (self.MIN_ROUNDS <= rounds <= self.MAX_ROUNDS):
            raise ValueError(
                f"Rounds must be between {self.MIN_ROUNDS} and {self.MAX_ROUNDS}, got {rounds}"
            )
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a password with a fresh salt.

        Raises:
            ValidationError: If password is empty
        """
        if not password:
            raise ValidationError("Password cannot be empty", field="password")

        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_prepare_password_for_bcrypt(password), salt).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        """Return True if ``password`` matches ``hashed_password``."""
        if not password or not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                _prepare_password_for_bcrypt(password),
                hashed_password.encode("utf-8"),
            )
        except ValueError as e:
            # Unparseable stored hash
            logger.warning(f"Error verifying password: {e}")
            return False


# ------------------------------------------------------------------ #
# JWT utilities
# ------------------------------------------------------------------ #

def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def create_access_token(
    jwt_settings: JWTSettings,
    *,
    subject: str,
    roles: Iterable[str],
    email: Optional[str] = None,
    now: Optional[datetime] = None,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, datetime]:
    """
    Sign an access token.

    Args:
        jwt_settings: Signing configuration
        subject: User identifier stored in ``sub``
        roles: Role names stored in ``roles``
        email: Optional email claim
        now: Issue time, defaults to the current UTC time
        expires_delta: Lifetime override

    Returns:
        The encoded token and its expiry time
    """
    issued_at = now or _utcnow()
    expires_at = issued_at + (
        expires_delta or timedelta(minutes=jwt_settings.access_token_expires_minutes)
    )
    claims: Dict[str, Any] = {
        "sub": subject,
        "roles": sorted(set(roles)),
        "iss": jwt_settings.issuer,
        "aud": jwt_settings.audience,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": uuid4().hex,
    }
    if email:
        claims["email"] = email

    token = jwt.encode(claims, jwt_settings.secret_key, algorithm=jwt_settings.algorithm)
    return token, expires_at


def decode_signed_claims(jwt_settings: JWTSettings, token: str) -> Dict[str, Any]:
    """
    Verify the signature and return the raw claims.

    Issuer, audience and expiry are left to the caller.

    Raises:
        jose.JWTError: If the token is malformed or the signature is invalid
    """
    return jwt.decode(
        token,
        jwt_settings.secret_key,
        algorithms=[jwt_settings.algorithm],
        options={
            "verify_aud": False,
            "verify_iss": False,
            "verify_exp": False,
            "verify_iat": False,
            "verify_nbf": False,
            "verify_sub": False,
            "verify_jti": False,
        },
    )
