"""Fluent construction of signed tokens.

``userId`` and ``roles`` are mandatory; ``build`` fails fast without them.

Example:
    ```python
    token = (
        TokenBuilder.create("my secret")
        .user_id("test")
        .roles(["role1", "role2"])
        .expiry_secs(10000)
        .build()
    )

    # Sliding renewal: same claims, exp recomputed from the new iat
    renewed = TokenBuilder.from_token(token, "my secret").build()
    ```
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .claims import ClaimSet
from .codec import TokenCodec, VerifiedToken
from .constants import DEFAULT_ALGORITHM, ROLES, USER_ID
from .options import OptionsManager


class TokenBuilder:
    """Accumulates claims and reserved-claim options, then signs on ``build``.

    Each builder owns its own ClaimSet and OptionsManager; nothing is shared
    between builders. ``build`` may be called repeatedly: every call reads
    the clock again and, when enabled, generates a new ``jti``.

    Attributes:
        _codec: Codec used to sign (carries the algorithm).
        _secret: Shared HMAC secret.
        _claims: Application claims.
        _options: Reserved-claim settings.
    """

    def __init__(
        self,
        codec: TokenCodec,
        secret: str,
        *,
        claims: ClaimSet | None = None,
        options: OptionsManager | None = None,
    ) -> None:
        if not secret:
            raise ValueError("secret cannot be empty")
        self._codec = codec
        self._secret = secret
        self._claims = claims if claims is not None else ClaimSet()
        self._options = options if options is not None else OptionsManager()

    @classmethod
    def create(cls, secret: str, algorithm: str = DEFAULT_ALGORITHM) -> TokenBuilder:
        """New empty builder with issued-at enabled."""
        return cls(TokenCodec(algorithm), secret)

    @classmethod
    def from_verified(
        cls, verified: VerifiedToken, secret: str, algorithm: str = DEFAULT_ALGORITHM
    ) -> TokenBuilder:
        """Builder restored from an already verified token.

        Side effects of rebuilding:
        - a present ``jti`` will be replaced on the next ``build``
        - ``exp`` is recalculated from the new issued-at
        - ``nbf`` is recalculated from the new issued-at

        Raises:
            MissingIssuedAt: If the token carries no ``iat`` claim.
        """
        return TokenCodec(algorithm).rebuild(verified, secret)

    @classmethod
    def from_token(
        cls, token: str, secret: str, algorithm: str = DEFAULT_ALGORITHM
    ) -> TokenBuilder:
        """Verify ``token`` with ``secret`` and restore a builder from it.

        Raises:
            InvalidToken: Any verification failure (see ``TokenCodec.verify``).
            MissingIssuedAt: If the token carries no ``iat`` claim.
        """
        codec = TokenCodec(algorithm)
        return codec.rebuild(codec.verify(token, secret), secret)

    @property
    def claims(self) -> ClaimSet:
        return self._claims

    @property
    def options(self) -> OptionsManager:
        return self._options

    def user_id(self, name: str) -> TokenBuilder:
        self._claims.put(USER_ID, name)
        return self

    def roles(self, roles: str | Iterable[str]) -> TokenBuilder:
        """Set the roles claim; a bare string is a single role."""
        if isinstance(roles, str):
            roles = (roles,)
        self._claims.put(ROLES, tuple(roles))
        return self

    def claim(self, key: str, value: Any) -> TokenBuilder:
        """Add a custom claim (last write wins)."""
        self._claims.put(key, value)
        return self

    def expiry_secs(self, seconds: int) -> TokenBuilder:
        """Set ``exp`` to the signing time + ``seconds``."""
        self._options.set_expiry_seconds(seconds)
        return self

    def not_before_leeway(self, seconds: int) -> TokenBuilder:
        """Set ``nbf`` to the signing time - ``seconds``."""
        self._options.set_not_before_leeway(seconds)
        return self

    def issued_at(self, enabled: bool) -> TokenBuilder:
        self._options.set_issued_at(enabled)
        return self

    def generate_token_id(self, enabled: bool) -> TokenBuilder:
        """Emit a random UUID as ``jti``."""
        self._options.set_token_id(enabled)
        return self

    def algorithm(self, algorithm: str) -> TokenBuilder:
        """Sign with another HMAC variant. Default is HS256."""
        self._codec = TokenCodec(algorithm)
        return self

    def build(self) -> str:
        """Create a new token.

        Raises:
            MissingMandatoryClaims: If userId and roles were not provided.
            InvalidPolicy: If an option holds a negative duration.
        """
        return self._codec.build(self._claims, self._options.policy(), self._secret)
