"""Exception handlers that render domain errors as ``{"error": message}`` bodies."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def error_message(exc: Exception) -> str:
    """Flatten a Protean exception's messages into one readable line."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        parts = []
        for field, field_messages in messages.items():
            if not isinstance(field_messages, (list, tuple)):
                field_messages = [field_messages]
            for message in field_messages:
                parts.append(str(message) if field.startswith("_") else f"{field}: {message}")
        return "; ".join(parts)
    if messages:
        return str(messages)
    return str(exc)


def _request_validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        message = error_message(exc)
        logger.info("Request rejected", path=request.url.path, error=message)
        return _error_response(400, message)

    @app.exception_handler(InvalidOperationError)
    async def invalid_operation_handler(request: Request, exc: InvalidOperationError):
        message = error_message(exc)
        logger.info("Operation refused", path=request.url.path, error=message)
        return _error_response(400, message)

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError):
        return _error_response(404, error_message(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, _request_validation_message(exc))
