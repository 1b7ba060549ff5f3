"""API middleware: request logging and error handling.

Starlette middleware is a stack (last added, first executed).  ``main.py``
adds ErrorHandlingMiddleware first and RequestLoggingMiddleware second, so
the logging middleware is outermost and records the final status code even
when an error was converted into a JSON body.
"""

from __future__ import annotations

import time

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from sharepoint_indexer.api.schemas import ErrorResponse
from sharepoint_indexer.utils.errors import IndexerError
from sharepoint_indexer.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert any uncaught exception into the structured 500 body.

    The error type and provider are logged server-side; the client sees only
    ``{"error": "Internal Server Error", "message": ...}``, where the message
    is :attr:`IndexerError.message` or ``str(exc)`` for other exceptions.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            message = exc.message if isinstance(exc, IndexerError) else str(exc)
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=message,
                provider=exc.provider_name if isinstance(exc, IndexerError) else None,
                path=str(request.url.path),
            )
            body = ErrorResponse(message=message)
            return JSONResponse(status_code=500, content=body.model_dump())
