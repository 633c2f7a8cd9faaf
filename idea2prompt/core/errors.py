# idea2prompt/core/errors.py
"""
Error taxonomy and the single place where it is translated to HTTP responses.

Handlers and services raise the exceptions below; ``register_exception_handlers``
installs the handlers that turn them into JSON bodies using ``ERROR_STATUS_CODES``.
"""
import logging
from typing import Dict, Optional, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map to a known HTTP status."""

    expose_detail = False

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(message if detail is None else f"{message}: {detail}")


class ValidationError(AppError):
    """A required field is missing, empty or malformed."""


class DuplicateIdentity(ValidationError):
    def __init__(self, message: str = "Email or username already exists"):
        super().__init__(message)


class AuthError(AppError):
    """Bad credentials or no bearer token."""


class InvalidToken(AuthError):
    """Malformed, unsigned or expired token. The cases are not distinguished."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class NotFoundOrForbidden(AppError):
    """Resource is absent or owned by someone else."""


class UpstreamError(AppError):
    expose_detail = True

    def __init__(self, detail: str, message: str = "Failed to generate prompt"):
        super().__init__(message, detail)


class UpstreamRejected(UpstreamError):
    """The generation endpoint answered with a non-success status."""


class EmptyResponse(UpstreamError):
    """The generation endpoint answered without any usable text."""


class StorageError(AppError):
    pass


ERROR_STATUS_CODES: Dict[Type[AppError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    InvalidToken: status.HTTP_403_FORBIDDEN,
    NotFoundOrForbidden: status.HTTP_404_NOT_FOUND,
    UpstreamError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

AVAILABLE_ENDPOINTS = {
    "pages": ["/", "/login"],
    "api": [
        "GET /api/health",
        "GET /api/test-gemini",
        "POST /api/register",
        "POST /api/login",
        "POST /api/generate-prompt",
        "GET /api/prompts",
        "DELETE /api/prompts/:id",
    ],
}


def status_code_for(exc: AppError) -> int:
    for klass in type(exc).__mro__:
        if klass in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[klass]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _debug_enabled(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.DEBUG)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)

    content = {"error": exc.message}
    if exc.detail and (exc.expose_detail or _debug_enabled(request)):
        content["details"] = exc.detail
    return JSONResponse(status_code=status_code, content=content)


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    return await app_error_handler(request, StorageError("Database error", str(exc)))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}" for error in errors
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": detail},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "Endpoint not found",
                "message": f"{request.method} {request.url.path} is not a valid endpoint",
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            },
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "message": str(exc) if _debug_enabled(request) else "Something went wrong",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
