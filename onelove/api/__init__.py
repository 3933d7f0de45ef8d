"""One Love API layer -- routes, schemas, and middleware."""

from onelove.api.middleware import (
    CORSHeadersMiddleware,
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    register_exception_handlers,
)
from onelove.api.routes import functions_router, router
from onelove.api.schemas import ErrorResponse, HealthResponse

__all__ = [
    "CORSHeadersMiddleware",
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "functions_router",
    "register_exception_handlers",
    "router",
    "ErrorResponse",
    "HealthResponse",
]
