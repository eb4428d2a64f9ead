from collections.abc import Callable
from typing import Any

import pytest
from flask import Flask

from jwt_guard import Identity, TokenBuilder

SECRET = "my secret"


@pytest.fixture()
def app():
    app = Flask(__name__)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def make_token() -> Callable[..., str]:
    """
    Factory fixture that returns a function.

    Usage in tests:
        token = make_token(user_id="test", expiry=10000)
    """

    def _make(
        *,
        user_id: str = "test",
        roles: tuple[str, ...] = ("role1", "role2"),
        expiry: int | None = 10000,
        secret: str = SECRET,
    ) -> str:
        builder = TokenBuilder.create(secret).user_id(user_id).roles(roles)
        if expiry is not None:
            builder.expiry_secs(expiry)
        return builder.build()

    return _make


class FakeRequest:
    """
    Minimal RequestSource stub.
    Records every lookup so tests can assert which sources were consulted.
    """

    def __init__(
        self,
        *,
        constrained: bool = True,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
    ):
        self.constrained = constrained
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.params = params or {}
        self.cookies = cookies or {}
        self.calls: list[tuple[str, str]] = []
        self.identity: Identity | None = None
        self.auth_type: str | None = None

    def header(self, name: str) -> str | None:
        self.calls.append(("header", name))
        return self.headers.get(name.lower())

    def parameter(self, name: str) -> str | None:
        self.calls.append(("parameter", name))
        return self.params.get(name)

    def cookie(self, name: str) -> str | None:
        self.calls.append(("cookie", name))
        return self.cookies.get(name)

    def requires_authentication(self) -> bool:
        return self.constrained

    def attach_identity(self, identity: Identity, auth_type: str) -> None:
        self.calls.append(("attach_identity", auth_type))
        self.identity = identity
        self.auth_type = auth_type


class FakeResponse:
    def __init__(self):
        self.headers: dict[str, str] = {}
        self.errors: list[tuple[int, str]] = []

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def unauthorized(self, status: int, message: str) -> None:
        self.errors.append((status, message))


class FakeNextStage:
    def __init__(self, request: FakeRequest | None = None):
        self.calls = 0
        self._request = request

    def __call__(self) -> Any:
        self.calls += 1
        if self._request is not None:
            self._request.calls.append(("next", ""))
        return "next-result"


@pytest.fixture
def fake_request() -> Callable[..., FakeRequest]:
    return FakeRequest


@pytest.fixture
def fake_response() -> FakeResponse:
    return FakeResponse()


@pytest.fixture
def fake_next() -> Callable[..., FakeNextStage]:
    return FakeNextStage
