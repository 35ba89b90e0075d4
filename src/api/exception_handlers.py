"""Exception handlers for the FastAPI application."""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode

logger = structlog.get_logger()


def _error_response(
    status_code: int, error_code: str, message: str, details: Any = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle domain exceptions raised by the services."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "app_exception",
            error_code=exc.error_code.value,
            message=exc.message,
        )
        return _error_response(exc.status_code, exc.error_code.value, exc.message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle HTTP exceptions from FastAPI/Starlette."""
        return _error_response(exc.status_code, "HTTP_ERROR", exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        logger.info("validation_error", errors=exc.errors())
        return _error_response(
            422,
            ErrorCode.VALIDATION_ERROR.value,
            "Request validation failed",
            [
                {
                    "field": ".".join(str(x) for x in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
                for error in exc.errors()
            ],
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """The store was unreachable or rejected the request."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "store_unavailable",
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )
        return _error_response(
            503,
            ErrorCode.STORE_UNAVAILABLE.value,
            "The data store is temporarily unavailable",
            {"request_id": request_id},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )

        message = "An unexpected error occurred"
        if not settings.is_production:
            message = str(exc)

        return _error_response(
            500,
            ErrorCode.INTERNAL_ERROR.value,
            message,
            {"request_id": request_id},
        )
