"""Reserved-claim emission settings.

The OptionsManager collects independent toggles for the reserved claims
(``iat``, ``exp``, ``nbf``, ``jti``) and produces an immutable RenewalPolicy
that the codec reads at signing time. Settings are not cross-validated when
set; ``RenewalPolicy.validate`` surfaces conflicts at build time.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidPolicy


def _require_int(name: str, value: int) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


@dataclass(frozen=True, slots=True)
class RenewalPolicy:
    """Which reserved claims the codec emits.

    Attributes:
        issued_at_enabled: Emit ``iat`` = now.
        expiry_seconds: Emit ``exp`` = now + expiry_seconds when set.
        not_before_leeway_seconds: Emit ``nbf`` = now - leeway when set.
        token_id_enabled: Emit a freshly generated ``jti``.
    """

    issued_at_enabled: bool = True
    expiry_seconds: int | None = None
    not_before_leeway_seconds: int | None = None
    token_id_enabled: bool = False

    def validate(self) -> None:
        """Raise InvalidPolicy if the policy is internally inconsistent."""
        if self.expiry_seconds is not None and self.expiry_seconds < 0:
            raise InvalidPolicy(
                f"expiry_seconds must not be negative, got {self.expiry_seconds}"
            )
        if (
            self.not_before_leeway_seconds is not None
            and self.not_before_leeway_seconds < 0
        ):
            raise InvalidPolicy(
                "not_before_leeway_seconds must not be negative, "
                f"got {self.not_before_leeway_seconds}"
            )


class OptionsManager:
    """Mutable accumulator for reserved-claim settings.

    Default state: issued-at enabled, no expiry, no leeway, no token id.
    Each setter is independent and returns the manager for chaining.
    """

    def __init__(self) -> None:
        self._issued_at = True
        self._expiry: int | None = None
        self._leeway: int | None = None
        self._token_id = False

    def set_issued_at(self, enabled: bool) -> OptionsManager:
        self._issued_at = bool(enabled)
        return self

    def set_expiry_seconds(self, seconds: int) -> OptionsManager:
        self._expiry = _require_int("expiry_seconds", seconds)
        return self

    def set_not_before_leeway(self, seconds: int) -> OptionsManager:
        self._leeway = _require_int("not_before_leeway", seconds)
        return self

    def set_token_id(self, enabled: bool) -> OptionsManager:
        self._token_id = bool(enabled)
        return self

    def policy(self) -> RenewalPolicy:
        """Snapshot the current settings as an immutable RenewalPolicy."""
        return RenewalPolicy(
            issued_at_enabled=self._issued_at,
            expiry_seconds=self._expiry,
            not_before_leeway_seconds=self._leeway,
            token_id_enabled=self._token_id,
        )
