"""Logging configuration shared by every bounded context.

Standard library logging carries the output (console, plus rotating files
when ``LOG_DIR`` is set); structlog renders structured events on top of it.
Request-scoped fields (method, path, request id) are bound per request by the
application middleware and merged into every event logged while it runs.
"""

import logging
import logging.handlers
import os
import sys
import uuid
from pathlib import Path

import structlog

LOG_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

QUIET_LOGGERS = ("protean", "urllib3", "stripe", "asyncio")

_MAX_LOG_BYTES = 10 * 1024 * 1024

_configured = False


def current_env() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", LOG_LEVELS.get(current_env(), "INFO")).upper()


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=_MAX_LOG_BYTES, backupCount=5, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def _handlers(level: str, log_dir: str | None) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    if not log_dir:
        return [console]

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return [
        console,
        _rotating_file(directory / "storefront.log", level),
        _rotating_file(directory / "storefront_error.log", logging.ERROR),
    ]


def _renderer():
    if current_env() in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(level: str | None = None, log_dir: str | None = None) -> None:
    """Set up stdlib handlers and structlog processors. Later calls are no-ops."""
    global _configured
    if _configured:
        return

    log_level = level or get_log_level()
    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers = _handlers(log_level, log_dir or os.getenv("LOG_DIR"))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request(method: str, path: str, request_id: str | None = None) -> str:
    """Start a fresh logging context for one HTTP request and return its id."""
    request_id = request_id or uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)
    return request_id


def unbind_request() -> None:
    structlog.contextvars.clear_contextvars()
