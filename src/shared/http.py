"""Translate application errors into JSON HTTP responses.

Every error body carries a ``message``; validation errors add a field-level
``errors`` list. Unexpected exceptions are logged with their traceback and
answered with a generic message so internal details never reach clients.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from shared.exceptions import (
    AuthenticationFailure,
    ConflictError,
    ExternalServiceError,
    Unauthorized,
    WebhookError,
)

logger = structlog.get_logger(__name__)

_STATUS_BY_ERROR = {
    AuthenticationFailure: 401,
    Unauthorized: 401,
    ConflictError: 409,
    ExternalServiceError: 502,
}


def field_errors(messages) -> list[dict]:
    """Flatten Protean's ``{field: [message, ...]}`` mapping into a list."""
    if isinstance(messages, dict):
        return [
            {"field": field, "message": message}
            for field, field_messages in messages.items()
            for message in (field_messages if isinstance(field_messages, list | tuple) else [field_messages])
        ]
    return [{"field": None, "message": str(messages)}]


def _request_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(location) or None, "message": error.get("msg", "Invalid value")})
    return errors


async def _on_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("request_rejected", path=request.url.path, errors=exc.messages)
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request data", "errors": field_errors(exc.messages)},
    )


async def _on_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = _request_errors(exc)
    logger.info("request_rejected", path=request.url.path, errors=errors)
    return JSONResponse(status_code=400, content={"message": "Invalid request data", "errors": errors})


async def _on_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    logger.info("object_not_found", path=request.url.path)
    return JSONResponse(status_code=404, content={"message": "Not found"})


async def _on_webhook_error(request: Request, exc: WebhookError) -> JSONResponse:
    logger.warning("webhook_rejected", path=request.url.path, reason=exc.message)
    return JSONResponse(status_code=400, content={"message": f"Webhook Error: {exc.message}"})


async def _on_application_error(request: Request, exc: Exception) -> JSONResponse:
    status_code = next(code for error_cls, code in _STATUS_BY_ERROR.items() if isinstance(exc, error_cls))
    if status_code >= 500:
        logger.error("dependency_failed", path=request.url.path, reason=exc.message)
    return JSONResponse(status_code=status_code, content={"message": exc.message})


async def unexpected_error_response(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected_error", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error-to-status mapping on ``app``."""
    app.add_exception_handler(ValidationError, _on_validation_error)
    app.add_exception_handler(RequestValidationError, _on_request_validation_error)
    app.add_exception_handler(ObjectNotFoundError, _on_not_found)
    app.add_exception_handler(WebhookError, _on_webhook_error)
    for error_cls in _STATUS_BY_ERROR:
        app.add_exception_handler(error_cls, _on_application_error)
    app.add_exception_handler(Exception, unexpected_error_response)
