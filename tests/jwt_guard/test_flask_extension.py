"""
Tests for the AuthExtension Flask integration.

Tests the decorator-based token authentication and the before_request hook.
"""

from collections.abc import Callable

import pytest
from flask import Flask, g

import jwt_guard as m

SECRET = "my secret"


def _protected_app(app: Flask, auth: m.AuthExtension) -> Flask:
    calls: list[str] = []
    app.config["VIEW_CALLS"] = calls

    @app.get("/x")
    @auth.require()
    def x():  # type: ignore
        calls.append("x")
        identity = m.current_identity()
        return {"user": identity.user_id, "roles": list(identity.roles), "type": g.auth_type}

    return app


class TestAuthExtensionBasics:
    """Test basic AuthExtension functionality."""

    def test_missing_token_returns_401(self, app: Flask):
        """Missing token should return 401 with the login message."""
        auth = m.AuthExtension(m.AuthConfig(secret=SECRET))
        c = _protected_app(app, auth).test_client()

        r = c.get("/x")

        assert r.status_code == 401
        assert b"Please login first" in r.data
        assert app.config["VIEW_CALLS"] == []

    def test_invalid_token_returns_401(self, app: Flask, make_token: Callable[..., str]):
        """Token signed with another secret should return 401 with the cause."""
        auth = m.AuthExtension(m.AuthConfig(secret=SECRET))
        c = _protected_app(app, auth).test_client()

        r = c.get("/x", headers={"X-Auth": make_token(secret="other secret")})

        assert r.status_code == 401
        assert b"Token not valid. Cause: Signature verification failed" in r.data
        assert app.config["VIEW_CALLS"] == []

    def test_valid_token_sets_identity(self, app: Flask, make_token: Callable[..., str]):
        auth = m.AuthExtension(m.AuthConfig(secret=SECRET))
        c = _protected_app(app, auth).test_client()

        r = c.get("/x", headers={"Authorization": "Bearer " + make_token()})

        assert r.status_code == 200
        assert r.get_json() == {"user": "test", "roles": ["role1", "role2"], "type": "TOKEN"}
        assert app.config["VIEW_CALLS"] == ["x"]
        assert "X-Auth" not in r.headers

    def test_token_in_query_parameter(self, app: Flask, make_token: Callable[..., str]):
        auth = m.AuthExtension(m.AuthConfig(secret=SECRET))
        c = _protected_app(app, auth).test_client()

        r = c.get("/x", query_string={"access_token": make_token()})

        assert r.status_code == 200

    def test_token_in_cookie(self, app: Flask, make_token: Callable[..., str]):
        auth = m.AuthExtension(m.AuthConfig(secret=SECRET, cookie_name="auth_token"))
        c = _protected_app(app, auth).test_client()
        c.set_cookie("auth_token", make_token())

        r = c.get("/x")

        assert r.status_code == 200


class TestRenewal:
    def test_renewed_token_in_response_header(
        self, app: Flask, make_token: Callable[..., str]
    ):
        auth = m.AuthExtension(m.AuthConfig(secret=SECRET, renew=True))
        c = _protected_app(app, auth).test_client()

        r = c.get("/x", headers={"X-Auth": make_token()})

        assert r.status_code == 200
        renewed = m.TokenCodec().verify(r.headers["X-Auth"], SECRET)
        assert renewed.claims["userId"] == "test"


class TestInitApp:
    def test_config_from_app_config(self, app: Flask, make_token: Callable[..., str]):
        app.config.update(JWT_SECRET=SECRET, JWT_RENEW="true")
        auth = m.AuthExtension()
        auth.init_app(app)
        c = _protected_app(app, auth).test_client()

        r = c.get("/x", headers={"X-Auth": make_token()})

        assert app.extensions["jwt_guard"] is auth
        assert auth.engine.config.renew is True
        assert r.status_code == 200
        assert "X-Auth" in r.headers

    def test_uninitialised_extension(self):
        auth = m.AuthExtension()

        with pytest.raises(RuntimeError, match="init_app"):
            auth.engine


class TestProtectHook:
    def test_predicate_decides_constraint(self, app: Flask, make_token: Callable[..., str]):
        auth = m.AuthExtension(m.AuthConfig(secret=SECRET))
        auth.protect(app, lambda request: request.path.startswith("/api/"))

        @app.get("/public")
        def public():  # type: ignore
            return {"identity": m.current_identity() is not None}

        @app.get("/api/data")
        def data():  # type: ignore
            return {"user": m.current_identity().user_id}

        c = app.test_client()

        assert c.get("/public").get_json() == {"identity": False}
        assert c.get("/api/data").status_code == 401
        r = c.get("/api/data", headers={"X-Auth": make_token()})
        assert r.status_code == 200
        assert r.get_json() == {"user": "test"}
