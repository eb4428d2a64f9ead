"""Per-request authentication decision.

High-level flow (per request)
-----------------------------
1. Ask the request whether the target resource is constrained. If not,
   pass straight to the next stage (``NoConstraint``).
2. Extract a candidate token: custom header > ``Authorization: Bearer`` >
   parameter > cookie. None found -> 401 "Please login first"
   (``RejectedMissing``).
3. Verify it with the TokenCodec. Failure -> 401 "Token not valid. Cause:
   <reason>" (``RejectedInvalid``).
4. Map the claims to an Identity and attach it with the ``TOKEN`` marker
   (``Authenticated``).
5. With renewal on, rebuild the token, re-sign it and send it back in the
   custom header (``Renewed``).
6. Invoke the next stage exactly once, and never after a rejection.

Failures are returned as values in the Decision; nothing raised during
extraction or verification escapes ``process``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from .codec import TokenCodec, VerifiedToken
from .config import AuthConfig
from .constants import AUTH_TYPE, ROLES, USER_ID
from .errors import AuthError, InvalidPolicy, InvalidToken, MissingIssuedAt, MissingToken
from .extractors import ChainExtractor, Extractor
from .identity import ClaimAccess, Identity
from .log_config import get_logger
from .protocols import NextStage, RequestSource, ResponseSink

logger = get_logger(__name__)


class AuthState(enum.Enum):
    NOT_EVALUATED = "not_evaluated"
    NO_CONSTRAINT = "no_constraint"
    TOKEN_EXTRACTED = "token_extracted"
    AUTHENTICATED = "authenticated"
    RENEWED = "renewed"
    REJECTED_MISSING = "rejected_missing"
    REJECTED_INVALID = "rejected_invalid"

    @property
    def passes(self) -> bool:
        """True for the terminal states that hand over to the next stage."""
        return self in _PASSING_STATES


_PASSING_STATES = frozenset(
    {AuthState.NO_CONSTRAINT, AuthState.AUTHENTICATED, AuthState.RENEWED}
)


@dataclass(frozen=True, slots=True)
class Decision:
    """Terminal outcome of one ``process`` call.

    Attributes:
        state: Terminal AuthState.
        identity: Attached identity (Authenticated/Renewed only).
        renewed_token: Token sent back to the client (Renewed only).
        error: The failure behind a Rejected* state.
        result: Whatever the next stage returned, if it ran.
    """

    state: AuthState
    identity: Identity | None = None
    renewed_token: str | None = None
    error: AuthError | None = None
    result: Any = None

    @property
    def message(self) -> str | None:
        return self.error.description if self.error is not None else None


class AuthDecisionEngine:
    """Orchestrates extraction, verification, identity and renewal.

    The engine holds only immutable collaborators (config, codec, extractor,
    claim access), so one instance serves all request threads.

    Example:
        ```python
        engine = AuthDecisionEngine(AuthConfig(secret="my secret", renew=True))
        decision = engine.process(request_source, response_sink, next_stage)
        if decision.state is AuthState.REJECTED_MISSING:
            ...
        ```
    """

    def __init__(
        self,
        config: AuthConfig,
        *,
        codec: TokenCodec | None = None,
        extractor: Extractor | None = None,
    ) -> None:
        self._config = config
        self._codec = codec or TokenCodec(config.algorithm)
        self._extractor: Extractor = extractor or ChainExtractor.default(
            header_name=config.header_name,
            parameter_name=config.parameter_name,
            cookie_name=config.cookie_name,
        )
        self._claims = ClaimAccess(config.identity_mapping)

    @property
    def config(self) -> AuthConfig:
        return self._config

    def process(
        self,
        request: RequestSource,
        response: ResponseSink,
        next_stage: NextStage,
    ) -> Decision:
        if not request.requires_authentication():
            return Decision(AuthState.NO_CONSTRAINT, result=next_stage())

        token = self._extractor.extract(request)
        if token is None:
            logger.info("token_missing")
            return self._reject(AuthState.REJECTED_MISSING, MissingToken(), response)

        # TOKEN_EXTRACTED
        verification = self._codec.check(token, self._config.secret)
        if not verification.ok or verification.token is None:
            return self._reject(AuthState.REJECTED_INVALID, verification.error, response)
        verified = verification.token

        try:
            identity = self._claims.identity(verified.claims)
        except InvalidToken as e:
            return self._reject(AuthState.REJECTED_INVALID, e, response)

        request.attach_identity(identity, AUTH_TYPE)
        logger.debug("request_authenticated", user_id=identity.user_id)

        state = AuthState.AUTHENTICATED
        renewed: str | None = None
        if self._config.renew:
            renewed = self._renew(verified, identity)
            if renewed is not None:
                response.set_header(self._config.header_name, renewed)
                state = AuthState.RENEWED

        return Decision(state, identity=identity, renewed_token=renewed, result=next_stage())

    def _reject(
        self,
        state: AuthState,
        error: AuthError | None,
        response: ResponseSink,
    ) -> Decision:
        error = error or InvalidToken("Unknown verification failure")
        if state is AuthState.REJECTED_INVALID:
            logger.info("token_rejected", reason=str(error), error=type(error).__name__)
        response.unauthorized(error.error_code, error.description)
        return Decision(state, error=error)

    def _renew(self, verified: VerifiedToken, identity: Identity) -> str | None:
        """Re-sign ``verified`` with a fresh iat/exp/nbf/jti.

        Claims are copied verbatim. The identity is only written under the
        built-in userId/roles names when the token lacks them (tokens issued
        with custom claim names), so the mandatory-claims check holds.
        """
        try:
            builder = self._codec.rebuild(verified, self._config.secret)
            if not builder.claims.contains_key(USER_ID):
                builder.user_id(identity.user_id)
            if not builder.claims.contains_key(ROLES):
                builder.roles(identity.roles)
            token = builder.build()
        except (MissingIssuedAt, InvalidPolicy, TypeError, ValueError) as e:
            logger.warning("token_renewal_failed", reason=str(e), user_id=identity.user_id)
            return None

        logger.debug("token_renewed", user_id=identity.user_id)
        return token
