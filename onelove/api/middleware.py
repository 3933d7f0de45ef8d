"""API middleware: CORS headers, request logging, error handling.

Starlette middleware is a stack (last added runs first).  main.py adds:

    app.add_middleware(ErrorHandlingMiddleware)    # innermost
    app.add_middleware(RequestLoggingMiddleware)
    configure_cors(app)                            # outermost

so preflight requests are answered before routing, every response
(errors included) carries the CORS headers, and the request log sees the
final status code.
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from onelove.api.schemas import ErrorResponse
from onelove.utils.errors import OneLoveError
from onelove.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).to_wire(),
    )


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Answer OPTIONS with an empty 200 and stamp CORS headers on replies."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


def configure_cors(app: FastAPI) -> None:
    """Add the wildcard-origin CORS middleware to the application."""
    app.add_middleware(CORSHeadersMiddleware)


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one ``http_request`` event per request.

    ``method`` and ``path`` are bound as structlog context vars for the
    lifetime of the request, so scanner or newsletter events logged while
    serving it carry them too.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        status = 500  # kept when call_next raises

        with structlog.contextvars.bound_contextvars(
            method=request.method,
            path=request.url.path,
        ):
            try:
                response = await call_next(request)
                status = response.status_code
                return response
            finally:
                _logger.info(
                    "http_request",
                    status=status,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn exceptions into ``{"error": message}`` JSON replies.

    ``OneLoveError`` subclasses answer with their own ``http_status``;
    anything else is a 500 carrying the exception text.  Stack traces
    stay in the server log.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except OneLoveError as exc:
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                status=exc.http_status,
                path=str(request.url.path),
            )
            return error_response(exc.http_status, exc.message)
        except Exception as exc:
            _logger.exception(
                "unhandled_error",
                error_type=type(exc).__name__,
                path=str(request.url.path),
            )
            return error_response(500, str(exc) or "Unknown error")


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return error_response(400, f"{field}: {message}" if field else message)


def register_exception_handlers(app: FastAPI) -> None:
    """Report body/query validation failures as 400 ``{"error": ...}``."""
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
