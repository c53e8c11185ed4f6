"""Centralized exception handlers for the FastAPI application.

Auth exceptions are mapped to HTTP responses by their error code.
Every failure, including framework errors, uses the same body.

Error Response Format:
    {
        "error": "Human-readable error message"
    }

Usage:
    from fullfuel.presentation.api.exception_handlers import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from fullfuel_auth.exceptions import AuthError, ErrorCode, StoreFailureError

logger = logging.getLogger(__name__)


# =============================================================================
# Error Code to HTTP Status Mapping
# =============================================================================

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    # 400 Bad Request - validation and conflicts
    ErrorCode.MISSING_FIELD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.WEAK_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_USERNAME: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNSUPPORTED_AUTH_METHOD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MISSING_ASSERTION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ASSERTION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ROLE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CANNOT_DEMOTE_SELF: status.HTTP_400_BAD_REQUEST,
    # 401 Unauthorized
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.MISSING_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    # 403 Forbidden
    ErrorCode.ADMIN_REQUIRED: status.HTTP_403_FORBIDDEN,
    # 404 Not Found
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # 500 / 504
    ErrorCode.STORE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
}

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _create_error_response(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers=headers,
    )


@asynccontextmanager
async def translate_failures(
    message: str,
    session: AsyncSession | None = None,
) -> AsyncIterator[None]:
    """Roll back and turn unexpected failures into a 500 with ``message``.

    Auth errors pass through to the central handler unchanged, except
    ``StoreFailureError`` whose text is never shown to clients.
    """
    try:
        yield
    except Exception as e:
        if session is not None:
            await session.rollback()
        if isinstance(e, AuthError) and not isinstance(e, StoreFailureError):
            raise
        logger.exception("%s: %s", message, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        ) from e


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(AuthError)
    async def auth_exception_handler(
        request: Request,
        exc: AuthError,
    ) -> JSONResponse:
        status_code = ERROR_CODE_TO_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)

        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Auth backend failure on %s %s: %s (code=%s)",
                request.method,
                request.url.path,
                exc.message,
                exc.code.value,
            )
        else:
            logger.info(
                "Auth error on %s %s: %s (code=%s)",
                request.method,
                request.url.path,
                exc.message,
                exc.code.value,
            )

        message = exc.message
        if isinstance(exc, StoreFailureError):
            message = INTERNAL_ERROR_MESSAGE
        return _create_error_response(status_code, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        _request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        return _create_error_response(
            exc.status_code,
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = exc.errors()
        logger.info(
            "Rejected request body on %s %s: %s",
            request.method,
            request.url.path,
            errors,
        )
        message = "Invalid request body"
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ())[1:])
            detail = first.get("msg", "")
            message = f"{message}: {field} {detail}" if field else f"{message}: {detail}"
        return _create_error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions with consistent error format."""
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return _create_error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            INTERNAL_ERROR_MESSAGE,
        )
