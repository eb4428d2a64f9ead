"""Flask extension for token authentication.

This module binds the AuthDecisionEngine to Flask. It provides Flask
implementations of the RequestSource/ResponseSink capabilities and two ways
of declaring which resources are constrained:

- ``AuthExtension.require()``: decorator, the decorated view is constrained
- ``AuthExtension.protect(app, predicate)``: ``before_request`` hook that
  asks ``predicate(request)`` for every request

Security Model:
1. Extract token from request (custom header, bearer header, parameter, cookie)
2. Verify token signature and expiry
3. Store the Identity in ``flask.g.identity`` for route access
4. Optionally return a renewed token in the custom header
5. Convert rejections to a 401 response via ``flask.abort``
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, Final, TypeAlias

from flask import Flask, Request, Response, abort, after_this_request, g, request

from .config import AuthConfig
from .engine import AuthDecisionEngine, Decision

if TYPE_CHECKING:
    from .identity import Identity
    from .protocols import NextStage

ViewFunc: TypeAlias = Callable[..., Any]
"""Type alias for Flask view functions."""

ConstraintPredicate: TypeAlias = Callable[[Request], bool]

_EXT_KEY: Final[str] = "jwt_guard"
"""Flask extensions registry key for AuthExtension."""


class FlaskRequestSource:
    """RequestSource over the current ``flask.request``.

    Parameters come from ``request.values`` (query string and form body).
    """

    def __init__(self, constrained: bool) -> None:
        self._constrained = constrained

    def header(self, name: str) -> str | None:
        return request.headers.get(name)

    def parameter(self, name: str) -> str | None:
        return request.values.get(name)

    def cookie(self, name: str) -> str | None:
        return request.cookies.get(name)

    def requires_authentication(self) -> bool:
        return self._constrained

    def attach_identity(self, identity: Identity, auth_type: str) -> None:
        g.identity = identity
        g.auth_type = auth_type


class FlaskResponseSink:
    """ResponseSink that defers writes to Flask.

    Headers are applied to whatever response the view produces (via
    ``after_this_request``). Unauthorized signals are recorded and turned into
    ``abort`` by the extension once the engine has returned.
    """

    def __init__(self) -> None:
        self.status: int | None = None
        self.message: str | None = None

    def set_header(self, name: str, value: str) -> None:
        @after_this_request
        def _set_header(response: Response) -> Response:
            response.headers[name] = value
            return response

    def unauthorized(self, status: int, message: str) -> None:
        self.status = status
        self.message = message


class AuthExtension:
    """
    Flask glue for token authentication.

    Responsibilities:
    - Build the AuthDecisionEngine from AuthConfig (or ``app.config``)
    - Run the engine for constrained views/requests
    - Store the Identity in ``flask.g.identity``
    - Convert rejections to HTTP 401 responses (abort)

    Pattern:
        auth = AuthExtension()
        auth.init_app(app)  # reads JWT_* keys from app.config

    Usage:
        auth = AuthExtension(AuthConfig(secret="my secret", renew=True))
        @app.get("/profile")
        @auth.require()
        def profile(): ...
    """

    def __init__(
        self,
        config: AuthConfig | None = None,
        *,
        engine: AuthDecisionEngine | None = None,
    ) -> None:
        if engine is None and config is not None:
            engine = AuthDecisionEngine(config)
        self._engine: AuthDecisionEngine | None = engine

    def init_app(self, app: Flask, *, config: AuthConfig | None = None) -> None:
        """Initialize the Flask app with the AuthExtension.

        Args:
            app (Flask): The Flask application instance.
            config (AuthConfig | None, optional): Overrides any configuration
                given at construction. When neither is present, the config is
                read from ``app.config`` (``JWT_*`` keys).
        """
        if config is not None:
            self._engine = AuthDecisionEngine(config)
        elif self._engine is None:
            self._engine = AuthDecisionEngine(AuthConfig.from_mapping(app.config))

        app.extensions[_EXT_KEY] = self

    @property
    def engine(self) -> AuthDecisionEngine:
        if self._engine is None:
            raise RuntimeError("AuthExtension is not initialised; call init_app()")
        return self._engine

    def _run(self, constrained: bool, next_stage: NextStage) -> Decision:
        sink = FlaskResponseSink()
        decision = self.engine.process(FlaskRequestSource(constrained), sink, next_stage)
        if not decision.state.passes:
            abort(sink.status or 401, description=sink.message)
        return decision

    def require(self):
        """Decorator to protect a Flask route with token authentication.

        Behavior:
        - Extract and verify the token, store the Identity in ``flask.g``
          and call the view exactly once
        - With renewal on, the response carries the renewed token in the
          configured custom header

        Error mapping:
        - no token      -> HTTP 401 ("Please login first")
        - invalid token -> HTTP 401 ("Token not valid. Cause: <reason>")

        Side Effects:
                - Writes ``flask.g.identity`` and ``flask.g.auth_type`` before calling the view.
                - May terminate request handling early via ``flask.abort``.
        """

        def decorator(view: ViewFunc) -> ViewFunc:
            @wraps(view)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                decision = self._run(True, lambda: view(*args, **kwargs))
                return decision.result

            return wrapper

        return decorator

    def protect(self, app: Flask, predicate: ConstraintPredicate) -> None:
        """Authenticate every request for which ``predicate(request)`` is true.

        The next stage is Flask's normal dispatch, so the hook returns None
        on success. Do not combine with ``require()`` on the same view.
        """

        def _guard() -> None:
            self._run(predicate(request), lambda: None)

        app.before_request(_guard)


def current_identity() -> Identity | None:
    """Identity attached to the current request, if any."""
    return g.get("identity")
