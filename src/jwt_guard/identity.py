"""Identity extraction from verified token claims.

This module maps a verified claim payload onto an Identity (user id + roles),
honouring optional custom claim names. Role extraction is fail-closed:
malformed role claims produce an empty role set rather than an error.

No authorization decision is made here; roles are only carried along.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import cast

from .constants import ROLES, USER_ID
from .errors import InvalidToken
from .protocols import Claims


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated principal attached to a request.

    Attributes:
        user_id: User reference taken from the token.
        roles: Roles in token order, duplicates removed.
    """

    user_id: str
    roles: tuple[str, ...] = ()

    def has_role(self, role: str) -> bool:
        return role in self.roles


@dataclass(frozen=True, slots=True)
class IdentityMapping:
    """Where to find identity data within the token claims.

    Attributes:
        user_id_claim: Claim holding the user id. Default "userId"; set to
            e.g. "sub" for tokens issued by a third party.
        roles_claim: Claim holding the roles list. Default "roles"; e.g.
            "authorities".

    Examples:
        >>> mapping = IdentityMapping(user_id_claim="sub", roles_claim="authorities")
    """

    user_id_claim: str = USER_ID
    roles_claim: str = ROLES


class ClaimAccess:
    """Extracts and normalizes identity data from verified claims.

    Args:
        mapping: Configuration defining where the user id and roles are
            located in the claims.

    Examples:
        >>> accessor = ClaimAccess(IdentityMapping())
        >>> accessor.identity({"userId": "test", "roles": ["role1", "role2"]})
        Identity(user_id='test', roles=('role1', 'role2'))
    """

    def __init__(self, mapping: IdentityMapping) -> None:
        self._m = mapping

    def user_id(self, claims: Claims) -> str:
        """Return the user id claim.

        Raises:
            InvalidToken: If the claim is missing or not a non-empty string.
        """
        raw = claims.get(self._m.user_id_claim)
        if not isinstance(raw, str) or not raw:
            raise InvalidToken(f"Missing '{self._m.user_id_claim}' claim")
        return raw

    def roles(self, claims: Claims) -> tuple[str, ...]:
        """Extract roles from claims.

        Supports:
        - List/tuple of strings: ["role1", "role2"]
        - Single string: "role1"

        Returns:
            Roles in claim order without duplicates. Empty tuple if the claim
            is missing or has an unexpected type.

        Examples:
            >>> accessor.roles({"roles": ["admin", 123, "user"]})
            ('admin', 'user')  # Non-strings filtered out
        """
        raw = claims.get(self._m.roles_claim, [])

        # Handle single string role
        if isinstance(raw, str):
            return (raw,)

        # Handle sequence of roles
        if isinstance(raw, (list, tuple)):
            raw_seq = cast(Sequence[object], raw)
            cleaned = [item for item in raw_seq if isinstance(item, str)]
            return tuple(dict.fromkeys(cleaned))

        # Fail-closed: unexpected types return no roles
        return ()

    def identity(self, claims: Claims) -> Identity:
        return Identity(user_id=self.user_id(claims), roles=self.roles(claims))
