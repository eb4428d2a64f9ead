"""Token extraction strategies.

This module provides implementations of the Extractor protocol for
retrieving a raw token from a RequestSource. Each extractor returns the
token, or None when its source yields nothing; ChainExtractor applies the
source precedence and stops at the first hit.

Implementations:
- CustomHeaderExtractor: configured custom header, read verbatim (``X-Auth``)
- BearerExtractor: ``Authorization: Bearer <token>`` (scheme case-insensitive)
- ParameterExtractor: query/form parameter (``access_token``)
- CookieExtractor: named cookie, a fallback for the parameter source

Security Considerations:
- Parameter tokens end up in access logs; prefer headers for API clients
- Cookie-based extraction requires CSRF protection on the host side
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .constants import AUTH_HEADER, AUTH_PARAM, AUTHORIZATION_HEADER, BEARER_PREFIX
from .protocols import RequestSource


class Extractor(Protocol):
    """Retrieves a raw token from one request source."""

    def extract(self, request: RequestSource) -> str | None:
        """Return the raw token, or None if this source has none."""
        ...


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CustomHeaderExtractor:
    """Reads the token verbatim from a custom header (default ``X-Auth``)."""

    def __init__(self, header_name: str = AUTH_HEADER) -> None:
        if not header_name or not header_name.strip():
            raise ValueError("header_name cannot be empty")
        self._name = header_name

    def extract(self, request: RequestSource) -> str | None:
        return _clean(request.header(self._name))


class BearerExtractor:
    """Extracts the token from the standard Authorization header.

    Expects requests with header format:
        Authorization: Bearer <token>

    The scheme is matched case-insensitively ("Bearer", "bearer", ...) and
    stripped. Other schemes (e.g. Basic) yield None so that later sources
    are still consulted.
    """

    def extract(self, request: RequestSource) -> str | None:
        auth_header = _clean(request.header(AUTHORIZATION_HEADER))
        if auth_header is None:
            return None

        if not auth_header.lower().startswith(BEARER_PREFIX):
            return None

        return _clean(auth_header[len(BEARER_PREFIX):])


class ParameterExtractor:
    """Reads the token from a query or form parameter (default ``access_token``)."""

    def __init__(self, parameter_name: str = AUTH_PARAM) -> None:
        if not parameter_name or not parameter_name.strip():
            raise ValueError("parameter_name cannot be empty")
        self._name = parameter_name

    def extract(self, request: RequestSource) -> str | None:
        return _clean(request.parameter(self._name))


class CookieExtractor:
    """Extracts the token from an HTTP cookie.

    The cookie value is handled exactly like a parameter token; the chain
    places it directly after the parameter source.

    Security Notes:
        - Cookies MUST use HttpOnly and Secure flags
        - Cookie-based auth is vulnerable to CSRF; implement CSRF protection

    Attributes:
        _name: Name of the cookie containing the token.
    """

    def __init__(self, cookie_name: str) -> None:
        if not cookie_name or not cookie_name.strip():
            raise ValueError("cookie_name cannot be empty")
        self._name = cookie_name

    def extract(self, request: RequestSource) -> str | None:
        return _clean(request.cookie(self._name))


class ChainExtractor:
    """Tries extractors in order and returns the first token found.

    Default precedence (see ``ChainExtractor.default``):
    custom header > Authorization bearer > parameter > cookie.
    """

    def __init__(self, extractors: Sequence[Extractor]) -> None:
        if not extractors:
            raise ValueError("ChainExtractor needs at least one extractor")
        self._extractors = tuple(extractors)

    @classmethod
    def default(
        cls,
        *,
        header_name: str = AUTH_HEADER,
        parameter_name: str = AUTH_PARAM,
        cookie_name: str | None = None,
    ) -> ChainExtractor:
        extractors: list[Extractor] = [
            CustomHeaderExtractor(header_name),
            BearerExtractor(),
            ParameterExtractor(parameter_name),
        ]
        if cookie_name:
            extractors.append(CookieExtractor(cookie_name))
        return cls(extractors)

    def extract(self, request: RequestSource) -> str | None:
        for extractor in self._extractors:
            token = extractor.extract(request)
            if token is not None:
                return token
        return None
