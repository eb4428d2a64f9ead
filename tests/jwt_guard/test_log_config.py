from collections.abc import Callable
from typing import Any

import structlog
from structlog.testing import capture_logs

import jwt_guard as m


def test_configure_logging():
    m.configure_logging("debug", json=True)
    try:
        assert structlog.is_configured()
    finally:
        structlog.reset_defaults()


def test_engine_logs_rejections_without_token_values(
    fake_request: Callable[..., Any], fake_response: Any, fake_next: Any
):
    engine = m.AuthDecisionEngine(m.AuthConfig(secret="my secret"))

    with capture_logs() as logs:
        engine.process(fake_request(), fake_response, fake_next())
        engine.process(fake_request(headers={"X-Auth": "a.b.c"}), fake_response, fake_next())

    events = [entry["event"] for entry in logs]
    assert events == ["token_missing", "token_rejected"]
    assert logs[1]["error"] == "MalformedToken"
    assert all("a.b.c" not in str(entry) for entry in logs)
