"""Token signing, verification and rebuild using PyJWT.

This module provides the TokenCodec, which:
- Signs a ClaimSet into a compact HMAC token, emitting reserved claims
  according to a RenewalPolicy
- Verifies a token against a shared secret and maps PyJWT exceptions to
  domain-specific error types
- Rebuilds builder state (claims + options) from an already verified token,
  which is what sliding-expiration renewal relies on

Wire format: ``b64url(header) "." b64url(payload) "." b64url(signature)``
with header ``{"alg": "HS256", "typ": "JWT"}`` and HMAC over the first two
segments. PyJWT produces and checks exactly this layout, and compares
signatures in constant time.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import jwt

from .claims import ClaimSet
from .constants import (
    DEFAULT_ALGORITHM,
    EXPIRES_AT,
    ISSUED_AT,
    NOT_BEFORE,
    RESERVED_CLAIMS,
    ROLES,
    SUPPORTED_ALGORITHMS,
    TOKEN_ID,
    USER_ID,
)
from .errors import (
    ExpiredToken,
    InvalidSignature,
    InvalidToken,
    MalformedToken,
    MissingIssuedAt,
    MissingMandatoryClaims,
    PrematureToken,
)
from .log_config import get_logger
from .options import OptionsManager, RenewalPolicy

if TYPE_CHECKING:
    from .builder import TokenBuilder

logger = get_logger(__name__)


def check_algorithm(algorithm: str) -> str:
    """Return ``algorithm`` if it is a supported HMAC variant.

    Raises:
        ValueError: For asymmetric, ``none`` or unknown algorithms.
    """
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(
            f"Unsupported algorithm '{algorithm}' "
            f"(expected one of {', '.join(sorted(SUPPORTED_ALGORITHMS))})"
        )
    return algorithm


@dataclass(frozen=True, slots=True)
class VerifiedToken:
    """Decoded claims of a token whose signature and expiry were checked.

    Only ``TokenCodec.verify`` produces these. The reserved-claim accessors
    return the original values, which ``rebuild`` needs.

    Attributes:
        claims: Read-only view of the full payload (reserved + application).
        header: Read-only view of the JOSE header.
    """

    claims: Mapping[str, Any]
    header: Mapping[str, Any]

    @property
    def issued_at(self) -> int | None:
        return self.claims.get(ISSUED_AT)

    @property
    def expires_at(self) -> int | None:
        return self.claims.get(EXPIRES_AT)

    @property
    def not_before(self) -> int | None:
        return self.claims.get(NOT_BEFORE)

    @property
    def token_id(self) -> str | None:
        return self.claims.get(TOKEN_ID)


@dataclass(frozen=True, slots=True)
class Verification:
    """Outcome of ``TokenCodec.check``: exactly one of token/error is set."""

    token: VerifiedToken | None = None
    error: InvalidToken | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TokenCodec:
    """HMAC token codec.

    The codec is immutable after construction and holds no per-call state,
    so a single instance can be shared across request threads.

    Example:
        ```python
        codec = TokenCodec()
        claims = ClaimSet().put("userId", "test").put("roles", ["role1"])
        policy = OptionsManager().set_expiry_seconds(3600).policy()

        token = codec.build(claims, policy, "my secret")
        verified = codec.verify(token, "my secret")
        assert verified.claims["userId"] == "test"
        ```

    Attributes:
        algorithm: HMAC algorithm identifier written to the ``alg`` header.
    """

    __slots__ = ("algorithm",)

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        self.algorithm = check_algorithm(algorithm)

    def build(self, claims: ClaimSet, policy: RenewalPolicy, secret: str) -> str:
        """Sign ``claims`` plus the reserved claims selected by ``policy``.

        Args:
            claims: Application claims; must contain userId and roles.
            policy: Which reserved claims to emit.
            secret: Shared HMAC secret.

        Returns:
            Compact token string.

        Raises:
            MissingMandatoryClaims: If userId or roles is absent.
            InvalidPolicy: If the policy has negative durations.
        """
        if not (claims.contains_key(USER_ID) and claims.contains_key(ROLES)):
            raise MissingMandatoryClaims("userId and roles claims must be added!")
        policy.validate()

        payload = claims.to_payload()
        now = int(time.time())
        if policy.issued_at_enabled:
            payload[ISSUED_AT] = now
        if policy.expiry_seconds is not None:
            payload[EXPIRES_AT] = now + policy.expiry_seconds
        if policy.not_before_leeway_seconds is not None:
            payload[NOT_BEFORE] = now - policy.not_before_leeway_seconds
        if policy.token_id_enabled:
            payload[TOKEN_ID] = str(uuid.uuid4())

        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str, secret: str) -> VerifiedToken:
        """Verify ``token`` and return its decoded claims.

        Raises:
            MalformedToken: Structure, encoding or header cannot be decoded.
            InvalidSignature: Recomputed HMAC does not match.
            ExpiredToken: ``exp`` is before the current time.
            PrematureToken: ``nbf``/``iat`` lies in the future.
        """
        if not isinstance(token, str) or not token:
            raise MalformedToken("Token must be a non-empty string")

        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],  # Explicit allowlist of one
                options={"require": [], "verify_aud": False},
            )
            header = jwt.get_unverified_header(token)

        except jwt.ExpiredSignatureError as e:
            raise ExpiredToken(str(e)) from e

        except jwt.ImmatureSignatureError as e:
            raise PrematureToken(str(e)) from e

        except jwt.InvalidSignatureError as e:
            raise InvalidSignature(str(e)) from e

        except jwt.InvalidTokenError as e:
            # Bad segments, base64, JSON, disallowed algorithm, bad claim types
            raise MalformedToken(str(e)) from e

        return VerifiedToken(
            claims=MappingProxyType(dict(claims)),
            header=MappingProxyType(dict(header)),
        )

    def check(self, token: str, secret: str) -> Verification:
        """Non-raising form of ``verify``."""
        try:
            return Verification(token=self.verify(token, secret))
        except InvalidToken as e:
            return Verification(error=e)

    def restore(self, verified: VerifiedToken) -> tuple[ClaimSet, OptionsManager]:
        """Derive builder state from a verified token.

        - ``iat`` is mandatory; its absence raises MissingIssuedAt.
        - ``exp`` becomes a duration: ``expiry_seconds = exp - iat``.
        - ``nbf`` becomes a duration: ``leeway = iat - nbf``.
        - ``jti`` is dropped and regeneration is enabled.
        - Every other claim is copied verbatim.
        """
        issued_at = verified.issued_at
        if issued_at is None:
            raise MissingIssuedAt("Missing 'iat' value. Unable to restore builder status")

        options = OptionsManager().set_issued_at(True)
        if verified.expires_at is not None:
            options.set_expiry_seconds(int(verified.expires_at) - int(issued_at))
        if verified.not_before is not None:
            options.set_not_before_leeway(int(issued_at) - int(verified.not_before))
        if verified.token_id is not None:
            options.set_token_id(True)

        claims = ClaimSet(
            {
                name: value
                for name, value in verified.claims.items()
                if name not in RESERVED_CLAIMS
            }
        )
        return claims, options

    def rebuild(self, verified: VerifiedToken, secret: str) -> TokenBuilder:
        """Return a builder primed with ``verified``'s state, ready to re-sign.

        Raises:
            MissingIssuedAt: If the token has no ``iat`` claim.
        """
        from .builder import TokenBuilder

        claims, options = self.restore(verified)
        logger.debug(
            "token_rebuilt",
            claims=len(claims),
            token_id_regenerated=verified.token_id is not None,
        )
        return TokenBuilder(self, secret, claims=claims, options=options)
