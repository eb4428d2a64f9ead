"""Wire-level names shared by the codec, the extractors and the engine."""

from __future__ import annotations

from typing import Final

AUTH_HEADER: Final[str] = "X-Auth"
"""Default custom header carrying the raw token (also used for renewed tokens)."""

AUTHORIZATION_HEADER: Final[str] = "Authorization"
"""Standard HTTP authorization header, read with a ``Bearer`` scheme."""

BEARER_PREFIX: Final[str] = "bearer "
"""Scheme prefix stripped from the authorization header (case-insensitive)."""

AUTH_PARAM: Final[str] = "access_token"
"""Default query/form parameter carrying the raw token."""

AUTH_TYPE: Final[str] = "TOKEN"
"""Authentication-type marker attached to authenticated requests."""

USER_ID: Final[str] = "userId"
ROLES: Final[str] = "roles"

# Reserved claims, emitted by the codec according to the renewal policy.
ISSUED_AT: Final[str] = "iat"
EXPIRES_AT: Final[str] = "exp"
NOT_BEFORE: Final[str] = "nbf"
TOKEN_ID: Final[str] = "jti"

RESERVED_CLAIMS: Final[frozenset[str]] = frozenset(
    {ISSUED_AT, EXPIRES_AT, NOT_BEFORE, TOKEN_ID}
)

DEFAULT_ALGORITHM: Final[str] = "HS256"
SUPPORTED_ALGORITHMS: Final[frozenset[str]] = frozenset({"HS256", "HS384", "HS512"})

LOGIN_REQUIRED_MESSAGE: Final[str] = "Please login first"
INVALID_TOKEN_MESSAGE: Final[str] = "Token not valid. Cause: {cause}"
