"""
Caller identity supplied by the identity provider

Tokens are issued elsewhere; this module only verifies them and turns the
claims into the scope every service call is filtered by.
"""

import logging
from typing import Optional

import jwt
from pydantic import BaseModel

from assetvault.core.exceptions import ScopeError

logger = logging.getLogger(__name__)

SUPERADMIN_ROLE = "SUPERADMIN"


class AuthenticationError(Exception):
    """Token missing, expired or not signed by the identity provider"""
    pass


class AuthenticatedUser(BaseModel):
    """Authenticated caller context"""

    user_id: str
    tenant_id: str
    client_id: Optional[str] = None
    role_name: str = "CLIENT"

    @property
    def is_superadmin(self) -> bool:
        return self.role_name == SUPERADMIN_ROLE


def require_client_id(user: AuthenticatedUser) -> str:
    """
    Client scope of the caller

    Raises:
        ScopeError: if the caller is not bound to a client
    """
    if not user.client_id:
        raise ScopeError()
    return user.client_id


def decode_access_token(token: str, secret_key: str, algorithm: str = "HS256") -> AuthenticatedUser:
    """
    Verify a bearer token and build the caller context

    Expected claims: sub, tenantId, clientId (optional), roleName.

    Raises:
        AuthenticationError: if the token is invalid or lacks identity claims
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected access token: {e}")
        raise AuthenticationError("Invalid or expired token") from e

    user_id = payload.get("sub")
    tenant_id = payload.get("tenantId")
    if not user_id or not tenant_id:
        raise AuthenticationError("Token is missing identity claims")

    return AuthenticatedUser(
        user_id=str(user_id),
        tenant_id=str(tenant_id),
        client_id=payload.get("clientId") or None,
        role_name=payload.get("roleName") or "CLIENT",
    )
