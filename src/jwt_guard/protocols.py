"""Protocol definitions for the token guard.

This module defines structural interfaces using Protocol (PEP 544) for the
capabilities the AuthDecisionEngine needs from its host container:

- RequestSource: header/parameter/cookie lookup, constraint lookup and
  identity attachment
- ResponseSink: set-header and signal-unauthorized
- NextStage: a single invoke of the rest of the pipeline

The engine depends only on these, never on a concrete web framework. Any
object that implements the required methods satisfies the protocol, so tests
can pass small fakes without inheritance.

Type aliases provide semantic clarity for claim payloads.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

if TYPE_CHECKING:
    from .identity import Identity

# ============================================================================
# Type Aliases
# ============================================================================

ClaimValue: TypeAlias = str | int | float | bool | tuple[str, ...]
"""Tagged union of values a claim may hold.

``str``, ``int`` and ``tuple[str, ...]`` (string array) are the primary
variants; ``bool`` and ``float`` are accepted for application claims.
"""

Claims: TypeAlias = Mapping[str, Any]
"""Represents a decoded JWT payload as an immutable mapping."""


# ============================================================================
# Host capabilities
# ============================================================================


class RequestSource(Protocol):
    """Read-side view of the incoming request.

    Lookups return ``None`` when the value is absent. Implementations must not
    raise for missing values: the engine treats ``None`` and ``""`` alike.
    """

    def header(self, name: str) -> str | None:
        """Return the header value for ``name`` (case-insensitive) or None."""
        ...

    def parameter(self, name: str) -> str | None:
        """Return the query/form parameter ``name`` or None."""
        ...

    def cookie(self, name: str) -> str | None:
        """Return the cookie ``name`` or None."""
        ...

    def requires_authentication(self) -> bool:
        """Constraint predicate: does the targeted resource require authentication?"""
        ...

    def attach_identity(self, identity: Identity, auth_type: str) -> None:
        """Bind the authenticated identity and auth-type marker to the request."""
        ...


class ResponseSink(Protocol):
    """Write-side view of the outgoing response."""

    def set_header(self, name: str, value: str) -> None:
        """Set a response header (used to deliver renewed tokens)."""
        ...

    def unauthorized(self, status: int, message: str) -> None:
        """Signal an unauthorized outcome.

        Args:
            status: Numeric HTTP status (always 401 from the engine).
            message: "Please login first" or "Token not valid. Cause: <reason>".
        """
        ...


class NextStage(Protocol):
    """The remainder of the request pipeline."""

    def __call__(self) -> Any:
        """Invoke the next stage. The engine calls this at most once per request."""
        ...
