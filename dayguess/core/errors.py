"""Error taxonomy and HTTP error handlers.

Two families live here and must not be confused:

* ``AppError`` and subclasses are request-level failures rendered as a
  normalized JSON error body.
* ``PreconditionViolation`` / ``InvariantViolation`` are ``AssertionError``
  subclasses signalling a caller or programming bug. They abort the operation
  that raised them and are never recovered inside the core.

Recoverable persistence fallbacks are not exceptions at all; see
``dayguess.models.results.LoadResult``.
"""

import logging
from typing import Optional
from uuid import uuid4

from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.requests import Request

from dayguess.core.logging import get_logger, get_request_id


class AppError(Exception):
    """Base for errors that map onto an HTTP status and a stable error code."""

    code = "app_error"
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or type(self).code
        self.status_code = status_code or type(self).status_code
        self.request_id = request_id


class ValidationError(AppError, ValueError):
    code = "validation_error"
    status_code = 400


class ConflictError(AppError):
    """The request is valid but today's game state does not allow it yet."""

    code = "conflict"
    status_code = 409


class PreconditionViolation(AssertionError):
    """A caller passed input that the contract forbids."""


class InvariantViolation(AssertionError):
    """Internal state broke a guaranteed invariant."""


def invariant(condition: object, message: str, *, error: type = PreconditionViolation) -> None:
    """Raise ``error(message)`` unless ``condition`` is truthy."""
    if not condition:
        raise error(message)


def _request_id_for(request: Request) -> str:
    return getattr(request.state, "request_id", None) or get_request_id() or str(uuid4())


def _render(request: Request, status: int, code: str, message: str, *, request_id: Optional[str] = None) -> JSONResponse:
    rid = request_id or _request_id_for(request)
    response = JSONResponse(
        status_code=status,
        content={
            "error": {"code": code, "message": message, "request_id": rid},
            "detail": message,
        },
    )
    response.headers["x-request-id"] = rid
    return response


async def app_error_handler(request: Request, exc: AppError):
    response = _render(request, exc.status_code, exc.code, exc.message, request_id=exc.request_id)
    get_logger().log(
        logging.ERROR if exc.status_code >= 500 else logging.WARNING,
        "app.error",
        extra={
            "request_id": response.headers["x-request-id"],
            "error_code": exc.code,
            "error_message": exc.message,
            "status": exc.status_code,
        },
    )
    return response


async def http_error_handler(request: Request, exc: HTTPException):
    code = "not_found" if exc.status_code == 404 else "http_error"
    response = _render(request, exc.status_code, code, str(exc.detail or "HTTP error"))
    get_logger().warning(
        "http.error",
        extra={"request_id": response.headers["x-request-id"], "error_code": code, "status": exc.status_code},
    )
    return response


async def unhandled_exception_handler(request: Request, exc: Exception):
    response = _render(request, 500, "internal_error", "Unexpected error")
    get_logger().error(
        "unhandled.exception",
        exc_info=exc,
        extra={"request_id": response.headers["x-request-id"], "error_code": "internal_error"},
    )
    return response
