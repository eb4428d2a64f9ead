"""Authentication errors.

This module defines the exception hierarchy for token building, verification
and per-request authentication. All errors inherit from AuthError so callers
can handle any auth failure generically.

Two families exist:

- Programmer errors raised while *building* a token (MissingMandatoryClaims,
  MissingIssuedAt, InvalidPolicy). These fail fast and are never converted
  into HTTP responses by the engine.
- Request-time failures (MissingToken and the InvalidToken family). The
  engine recovers these locally and turns them into a single 401 response.

Every error carries an ``error_code`` (HTTP status) and a ``description``
(client-facing text) consumed by the Flask binding through ``flask.abort``.
"""

from __future__ import annotations

from .constants import INVALID_TOKEN_MESSAGE, LOGIN_REQUIRED_MESSAGE


class AuthError(Exception):
    """Base exception for all authentication failures.

    Attributes:
        error_code: HTTP status code a web binding should answer with.
        description: Human-readable text safe to return to the client.
    """

    error_code: int = 401

    @property
    def description(self) -> str:
        return str(self) or self.__class__.__name__


class MissingMandatoryClaims(AuthError):  # noqa: N818
    """Raised by ``build`` when the userId or roles claim is absent.

    This is a caller bug, not a client failure: no partial token is produced.
    """

    error_code = 500


class MissingIssuedAt(AuthError):  # noqa: N818
    """Raised when rebuilding from a token that carries no ``iat`` claim.

    Expiry and not-before are stored relative to issued-at, so without it
    the builder state cannot be restored.
    """

    error_code = 500


class InvalidPolicy(AuthError):  # noqa: N818
    """Raised at build time for an inconsistent renewal policy (e.g. negative expiry)."""

    error_code = 500


class MissingToken(AuthError):  # noqa: N818
    """Raised when no candidate token is found in any extraction source.

    Sources checked, in order: custom header, ``Authorization: Bearer``,
    request parameter, cookie.
    """

    @property
    def description(self) -> str:
        return LOGIN_REQUIRED_MESSAGE


class InvalidToken(AuthError):  # noqa: N818
    """Raised when a token is present but cannot be verified.

    The message is the specific verification cause; ``description`` wraps it
    in the client-facing "Token not valid" text.
    """

    @property
    def cause(self) -> str:
        return str(self)

    @property
    def description(self) -> str:
        return INVALID_TOKEN_MESSAGE.format(cause=self.cause)


class MalformedToken(InvalidToken):
    """Raised when the token cannot be decoded (segments, base64, JSON, header)."""


class InvalidSignature(InvalidToken):
    """Raised when the recomputed HMAC does not match the token's signature."""


class ExpiredToken(InvalidToken):
    """Raised when the token's ``exp`` claim is before the current time."""


class PrematureToken(InvalidToken):
    """Raised when the token's ``nbf`` (or ``iat``) lies in the future."""
