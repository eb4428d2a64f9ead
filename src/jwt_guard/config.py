"""Process-wide authentication configuration.

AuthConfig is built once at startup (from keyword arguments, a mapping such
as ``flask.Flask.config``, or the environment) and is read-only afterwards,
so it can be shared by any number of request threads without locking.

Recognized keys (with the default ``JWT_`` prefix):

==================== ====================== ==============================
Key                  Field                  Default
==================== ====================== ==============================
JWT_SECRET           secret                 required
JWT_ALGORITHM        algorithm              HS256
JWT_RENEW            renew                  false
JWT_USER_ID_CLAIM    user_id_claim          userId
JWT_ROLES_CLAIM      roles_claim            roles
JWT_COOKIE_NAME      cookie_name            disabled
JWT_HEADER_NAME      header_name            X-Auth
JWT_PARAMETER_NAME   parameter_name         access_token
==================== ====================== ==============================
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from dotenv import load_dotenv

from .codec import check_algorithm
from .constants import AUTH_HEADER, AUTH_PARAM, DEFAULT_ALGORITHM, ROLES, USER_ID
from .identity import IdentityMapping

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Authentication settings.

    Attributes:
        secret: Shared HMAC secret. Required.
        algorithm: HS256, HS384 or HS512.
        renew: Issue a renewed token on every authenticated request.
        user_id_claim: Claim to read the user id from.
        roles_claim: Claim to read the roles from.
        cookie_name: Cookie carrying the token; None disables the source.
        header_name: Custom header carrying the token, also used to
            return renewed tokens.
        parameter_name: Request parameter carrying the token.

    Raises:
        ValueError: On an empty secret or an unsupported algorithm.
    """

    secret: str = field(repr=False)
    algorithm: str = DEFAULT_ALGORITHM
    renew: bool = False
    user_id_claim: str = USER_ID
    roles_claim: str = ROLES
    cookie_name: str | None = None
    header_name: str = AUTH_HEADER
    parameter_name: str = AUTH_PARAM

    def __post_init__(self) -> None:
        if not self.secret:
            raise ValueError("secret is required")
        check_algorithm(self.algorithm)

    @property
    def identity_mapping(self) -> IdentityMapping:
        return IdentityMapping(
            user_id_claim=self.user_id_claim, roles_claim=self.roles_claim
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], prefix: str = "JWT_") -> AuthConfig:
        """Build a config from ``mapping`` (e.g. ``app.config`` or ``os.environ``).

        Empty values fall back to the defaults.
        """

        def get(key: str) -> Any:
            value = mapping.get(prefix + key)
            return None if value in (None, "") else value

        kwargs: dict[str, Any] = {"secret": get("SECRET") or ""}
        if (algorithm := get("ALGORITHM")) is not None:
            kwargs["algorithm"] = str(algorithm).upper()
        if (renew := get("RENEW")) is not None:
            kwargs["renew"] = _as_bool(renew)
        for key, attr in (
            ("USER_ID_CLAIM", "user_id_claim"),
            ("ROLES_CLAIM", "roles_claim"),
            ("COOKIE_NAME", "cookie_name"),
            ("HEADER_NAME", "header_name"),
            ("PARAMETER_NAME", "parameter_name"),
        ):
            if (value := get(key)) is not None:
                kwargs[attr] = str(value)
        return cls(**kwargs)

    @classmethod
    def from_env(cls, dotenv_path: str | None = None, prefix: str = "JWT_") -> AuthConfig:
        """Load ``.env`` (if present) into the environment, then read it."""
        load_dotenv(dotenv_path)
        return cls.from_mapping(os.environ, prefix=prefix)
