"""Error handling utilities and custom exceptions."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from ..models.enums import ErrorCode
from ..models.error_response import ErrorEnvelope
from .logging_middleware import REQUEST_ID_HEADER

T = TypeVar("T")


class AIException(Exception):
    """Base exception for failures in chat, agent and RAG operations.

    Every instance carries an :class:`ErrorCode` so the HTTP layer can
    translate it without inspecting the message.  ``message`` defaults to
    the code's standard text and ``details`` holds diagnostic information
    such as the message of the underlying cause.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str | None = None,
        details: str | None = None,
        *,
        code: ErrorCode | None = None,
    ) -> None:
        if code is not None:
            self.code = code
        self.message = message or self.code.default_message
        self.details = details
        super().__init__(self.message)

    def to_envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(code=self.code, message=self.message, details=self.details)


class InvalidMessageError(AIException):
    code = ErrorCode.INVALID_MESSAGE


class FileProcessingError(AIException):
    code = ErrorCode.FILE_PROCESSING_ERROR


class RagError(AIException):
    code = ErrorCode.RAG_ERROR


class LlmError(AIException):
    code = ErrorCode.LLM_ERROR


class TimedOutError(AIException):
    code = ErrorCode.TIMED_OUT


class TokenLimitError(AIException):
    code = ErrorCode.TOKEN_LIMIT


class UnauthorizedError(AIException):
    code = ErrorCode.UNAUTHORIZED


# ---------------------------------------------------------------------------
# Exception handlers registered on the FastAPI application


def _envelope_response(status_code: int, envelope: ErrorEnvelope) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))


async def ai_exception_handler(request: Request, exc: AIException) -> JSONResponse:
    """Convert a domain exception into a 400 error envelope."""
    logger.error("AIException occurred: {} - {}", exc.code.value, exc.message)
    return _envelope_response(status.HTTP_400_BAD_REQUEST, exc.to_envelope())


async def invalid_input_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert malformed input into an ``INVALID_MESSAGE`` envelope."""
    logger.error("Invalid input on {}: {}", request.url.path, exc)
    envelope = ErrorEnvelope(
        code=ErrorCode.INVALID_MESSAGE,
        message=ErrorCode.INVALID_MESSAGE.default_message,
        details=str(exc),
    )
    return _envelope_response(status.HTTP_400_BAD_REQUEST, envelope)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert any other exception into a generic 500 envelope."""
    logger.opt(exception=exc).error("Unexpected exception occurred on {}", request.url.path)
    envelope = ErrorEnvelope(
        code=ErrorCode.INTERNAL_ERROR,
        message=ErrorCode.INTERNAL_ERROR.default_message,
        details=str(exc),
    )
    response = _envelope_response(status.HTTP_500_INTERNAL_SERVER_ERROR, envelope)
    # The logging middleware re-raises before it can stamp its header
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


def register_exception_handlers(app: Any) -> None:
    """Attach the error translation handlers to ``app``."""
    app.add_exception_handler(AIException, ai_exception_handler)
    app.add_exception_handler(RequestValidationError, invalid_input_handler)
    app.add_exception_handler(ValueError, invalid_input_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# ---------------------------------------------------------------------------
# Decorators for synchronous service methods


def wrap_errors(
    error_cls: type[AIException],
    message: str | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator enforcing the service boundary error policy.

    :class:`AIException` subclasses raised by the wrapped function are
    re-raised unchanged.  Any other exception is logged and converted into
    ``error_cls`` with the original message preserved as ``details``.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except AIException:
                raise
            except Exception as exc:
                logger.exception("Error in {}: {}", func.__name__, exc)
                raise error_cls(message, details=str(exc)) from exc

        return wrapper

    return decorator
