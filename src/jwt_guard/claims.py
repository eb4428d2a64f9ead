"""Ordered claim storage for tokens under construction."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Set
from typing import Any, cast

from .protocols import ClaimValue


def _coerce(name: str, value: Any) -> ClaimValue:
    """Normalise ``value`` to one of the ClaimValue variants.

    Raises:
        TypeError: If the value is not a string, number, boolean or a
            collection of strings.
    """
    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (list, tuple, Set)):
        items = list(cast(Any, value))
        if all(isinstance(item, str) for item in items):
            return tuple(items)
    raise TypeError(
        f"Unsupported value for claim '{name}': {type(value).__name__}"
    )


class ClaimSet:
    """Insertion-ordered mapping from claim name to claim value.

    Keys are unique; ``put`` overwrites (last write wins). There is no public
    removal: reserved claims are excluded by the codec before ``put_all``.

    Example:
        ```python
        claims = ClaimSet()
        claims.put("userId", "test").put("roles", ["role1", "role2"])
        assert claims.contains_key("userId")
        ```
    """

    __slots__ = ("_claims",)

    def __init__(self, claims: Mapping[str, Any] | None = None) -> None:
        self._claims: dict[str, ClaimValue] = {}
        if claims:
            self.put_all(claims)

    def put(self, name: str, value: Any) -> ClaimSet:
        if not name:
            raise ValueError("Claim name cannot be empty")
        self._claims[name] = _coerce(name, value)
        return self

    def put_all(self, claims: Mapping[str, Any]) -> ClaimSet:
        """Bulk import; ``None`` values (JSON null) are skipped."""
        for name, value in claims.items():
            if value is not None:
                self.put(name, value)
        return self

    def contains_key(self, name: str) -> bool:
        return name in self._claims

    def get(self, name: str, default: ClaimValue | None = None) -> ClaimValue | None:
        return self._claims.get(name, default)

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-ready copy (string arrays become lists)."""
        return {
            name: list(value) if isinstance(value, tuple) else value
            for name, value in self._claims.items()
        }

    def __contains__(self, name: object) -> bool:
        return name in self._claims

    def __iter__(self) -> Iterator[str]:
        return iter(self._claims)

    def __len__(self) -> int:
        return len(self._claims)

    def __repr__(self) -> str:
        return f"ClaimSet({self._claims!r})"
