import structlog

from shared.logging import bind_request, get_log_level, unbind_request


def test_level_follows_environment(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setenv("PROTEAN_ENV", "production")
    assert get_log_level() == "INFO"

    monkeypatch.setenv("PROTEAN_ENV", "test")
    assert get_log_level() == "WARNING"


def test_explicit_level_wins(monkeypatch):
    monkeypatch.setenv("PROTEAN_ENV", "production")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert get_log_level() == "DEBUG"


def test_request_context_is_bound_and_cleared():
    request_id = bind_request("POST", "/api/login")
    try:
        bound = structlog.contextvars.get_contextvars()
        assert bound == {"request_id": request_id, "method": "POST", "path": "/api/login"}
    finally:
        unbind_request()

    assert structlog.contextvars.get_contextvars() == {}


def test_supplied_request_id_is_kept():
    try:
        assert bind_request("GET", "/health", "req-1") == "req-1"
    finally:
        unbind_request()
