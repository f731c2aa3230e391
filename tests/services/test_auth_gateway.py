"""
Tests for token issue, validation order and role checks.
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from jose import jwt

from bookstore.core.exceptions import AuthError, AuthErrorKind, ForbiddenError
from bookstore.services.auth.auth_gateway import AuthGateway, TrustLevel
from bookstore.services.auth.identity_store import IdentityStore
from bookstore.services.common.permissions import Principal, Roles
from bookstore.services.common.security import create_access_token

ADMIN = Principal(user_id="1", roles=frozenset({Roles.ADMINISTRATOR, Roles.CUSTOMER}), email="admin@bookstore.io")
CUSTOMER = Principal(user_id="2", roles=frozenset({Roles.CUSTOMER}), email="reader@bookstore.io")

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def identity_store():
    store = Mock(spec=IdentityStore)
    store.verify_credentials.return_value = None
    return store


@pytest.fixture
def gateway(jwt_settings, identity_store):
    return AuthGateway(jwt_settings, identity_store, clock=lambda: FIXED_NOW)


def token_for(settings, principal=CUSTOMER, issued_at=FIXED_NOW, **overrides):
    token, _ = create_access_token(
        replace(settings, **overrides),
        subject=principal.user_id,
        roles=principal.roles,
        email=principal.email,
        now=issued_at,
    )
    return token


class TestIssueToken:
    def test_issues_token_for_valid_credentials(self, gateway, identity_store, jwt_settings):
        identity_store.verify_credentials.return_value = ADMIN

        issued = gateway.issue_token(SimpleNamespace(email="admin@bookstore.io", password="secret"))

        identity_store.verify_credentials.assert_called_once_with("admin@bookstore.io", "secret")
        assert issued.token_type == "bearer"
        assert issued.expires_at == FIXED_NOW + timedelta(minutes=jwt_settings.access_token_expires_minutes)
        claims = jwt.get_unverified_claims(issued.access_token)
        assert claims["sub"] == "1"
        assert claims["roles"] == sorted(ADMIN.roles)
        assert claims["iss"] == claims["aud"] == "bookstore-api"
        assert claims["email"] == "admin@bookstore.io"
        assert {"iat", "exp", "jti"} <= claims.keys()

    def test_invalid_credentials(self, gateway):
        with pytest.raises(AuthError) as exc_info:
            gateway.issue_token(SimpleNamespace(email="x@bookstore.io", password="wrong"))
        assert exc_info.value.kind is AuthErrorKind.INVALID_CREDENTIALS
        assert exc_info.value.status_code == 401

    def test_issued_token_round_trips_to_principal(self, gateway, identity_store):
        identity_store.verify_credentials.return_value = ADMIN
        issued = gateway.issue_token(SimpleNamespace(email="admin@bookstore.io", password="secret"))

        assert gateway.authenticate(issued.access_token) == ADMIN


class TestAuthenticate:
    def test_expired_token_with_valid_signature(self, gateway, jwt_settings):
        token = token_for(jwt_settings, issued_at=FIXED_NOW - timedelta(hours=2))

        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate(token)
        assert exc_info.value.kind is AuthErrorKind.EXPIRED

    def test_token_expiring_exactly_now_is_expired(self, gateway, jwt_settings):
        token = token_for(jwt_settings, issued_at=FIXED_NOW - timedelta(minutes=60))
        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate(token)
        assert exc_info.value.kind is AuthErrorKind.EXPIRED

    def test_wrong_issuer(self, gateway, jwt_settings):
        token = token_for(jwt_settings, issuer="someone-else")
        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate(token)
        assert exc_info.value.kind is AuthErrorKind.WRONG_ISSUER

    def test_wrong_audience(self, gateway, jwt_settings):
        token = token_for(jwt_settings, audience="another-api")
        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate(token)
        assert exc_info.value.kind is AuthErrorKind.WRONG_AUDIENCE

    def test_bad_signature(self, gateway, jwt_settings):
        token = token_for(jwt_settings, secret_key="not-the-signing-key")
        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate(token)
        assert exc_info.value.kind is AuthErrorKind.BAD_SIGNATURE

    def test_garbage_token_is_bad_signature(self, gateway):
        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate("not.a.jwt")
        assert exc_info.value.kind is AuthErrorKind.BAD_SIGNATURE

    @pytest.mark.parametrize(
        "overrides, expected",
        [
            # signature is checked before everything else
            ({"secret_key": "other", "issuer": "x", "audience": "y"}, AuthErrorKind.BAD_SIGNATURE),
            # issuer before audience
            ({"issuer": "x", "audience": "y"}, AuthErrorKind.WRONG_ISSUER),
            # audience before expiry
            ({"audience": "y"}, AuthErrorKind.WRONG_AUDIENCE),
        ],
    )
    def test_checks_stop_at_first_failure(self, gateway, jwt_settings, overrides, expected):
        token = token_for(jwt_settings, issued_at=FIXED_NOW - timedelta(days=1), **overrides)
        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate(token)
        assert exc_info.value.kind is expected

    @pytest.mark.parametrize("missing", ["sub", "exp"])
    def test_missing_required_claim_is_malformed(self, gateway, jwt_settings, missing):
        claims = {
            "sub": "1",
            "roles": [],
            "iss": jwt_settings.issuer,
            "aud": jwt_settings.audience,
            "exp": int((FIXED_NOW + timedelta(minutes=5)).timestamp()),
        }
        del claims[missing]
        token = jwt.encode(claims, jwt_settings.secret_key, algorithm=jwt_settings.algorithm)

        with pytest.raises(AuthError) as exc_info:
            gateway.authenticate(token)
        assert exc_info.value.kind is AuthErrorKind.MALFORMED


class TestAuthorize:
    def test_authorize_is_set_membership(self, gateway):
        principal = Principal(user_id="1", roles=frozenset({"Admin"}))
        assert gateway.authorize(principal, "Admin") is True
        assert gateway.authorize(principal, "SuperAdmin") is False


class TestGate:
    def test_missing_header(self, gateway):
        trust = gateway.gate(None, [Roles.CUSTOMER])
        assert trust.level is TrustLevel.REJECTED
        assert trust.error.kind is AuthErrorKind.MISSING_TOKEN
        assert trust.reached is TrustLevel.UNAUTHENTICATED

    @pytest.mark.parametrize("header", ["Basic abc", "Bearer", "Bearer  ", "token"])
    def test_ill_formed_header(self, gateway, header):
        trust = gateway.gate(header)
        assert trust.error.kind is AuthErrorKind.MISSING_TOKEN

    def test_valid_token_without_required_role_is_forbidden(self, gateway, jwt_settings):
        trust = gateway.gate(f"Bearer {token_for(jwt_settings)}", [Roles.ADMINISTRATOR])

        assert trust.level is TrustLevel.REJECTED
        assert trust.principal == CUSTOMER
        assert trust.reached is TrustLevel.VALIDATED
        assert isinstance(trust.error, ForbiddenError)
        with pytest.raises(ForbiddenError):
            trust.require()

    def test_valid_token_with_role_is_authorized(self, gateway, jwt_settings):
        trust = gateway.gate(f"bearer {token_for(jwt_settings, ADMIN)}", [Roles.ADMINISTRATOR])

        assert trust.is_authorized
        assert trust.require() == ADMIN

    def test_no_required_roles_admits_any_valid_token(self, gateway, jwt_settings):
        assert gateway.gate(f"Bearer {token_for(jwt_settings)}").is_authorized

    def test_expired_token_is_rejected(self, gateway, jwt_settings):
        token = token_for(jwt_settings, issued_at=FIXED_NOW - timedelta(hours=3))
        trust = gateway.gate(f"Bearer {token}")
        assert trust.level is TrustLevel.REJECTED
        assert trust.error.kind is AuthErrorKind.EXPIRED
        assert trust.reached is TrustLevel.TOKEN_PRESENTED
