"""Tests for bearer token verification."""

import jwt
import pytest

from assetvault.core.exceptions import ScopeError
from assetvault.core.security import (
    AuthenticatedUser, AuthenticationError, decode_access_token, require_client_id,
)

SECRET = "unit-test-secret-key-of-sufficient-length"


def token(claims, secret=SECRET):
    return jwt.encode(claims, secret, algorithm="HS256")


class TestDecodeAccessToken:
    def test_claims(self):
        user = decode_access_token(
            token({"sub": "u1", "tenantId": "t1", "clientId": "c1", "roleName": "CLIENT"}), SECRET
        )
        assert user == AuthenticatedUser(user_id="u1", tenant_id="t1", client_id="c1", role_name="CLIENT")

    def test_superadmin(self):
        user = decode_access_token(token({"sub": "u1", "tenantId": "t1", "roleName": "SUPERADMIN"}), SECRET)
        assert user.is_superadmin
        assert user.client_id is None

    def test_wrong_secret(self):
        with pytest.raises(AuthenticationError):
            decode_access_token(token({"sub": "u1", "tenantId": "t1"}, secret="another-secret-of-good-length!!"), SECRET)

    def test_missing_tenant(self):
        with pytest.raises(AuthenticationError):
            decode_access_token(token({"sub": "u1"}), SECRET)


class TestRequireClientId:
    def test_scoped(self):
        assert require_client_id(AuthenticatedUser(user_id="u", tenant_id="t", client_id="c")) == "c"

    def test_unscoped(self):
        with pytest.raises(ScopeError):
            require_client_id(AuthenticatedUser(user_id="u", tenant_id="t"))
