"""Utility modules for One Love.

- **errors** -- exception hierarchy rooted at OneLoveError; each subclass
  carries the HTTP status the API layer answers with.
- **logging** -- structlog setup with console output in development and
  JSON in production.
- **concurrency** -- joined fan-out for independent backend queries.
- **json_reply** -- recovery of JSON objects from AI replies.
"""

from onelove.utils.concurrency import gather_named
from onelove.utils.errors import (
    AuthRequiredError,
    BackendError,
    ConfigurationError,
    NotFoundError,
    OneLoveError,
    ParseError,
    RateLimitError,
    UpstreamError,
    UsageLimitError,
    ValidationError,
)
from onelove.utils.json_reply import parse_json_reply
from onelove.utils.logging import configure_logging, get_logger

__all__ = [
    "AuthRequiredError",
    "BackendError",
    "ConfigurationError",
    "NotFoundError",
    "OneLoveError",
    "ParseError",
    "RateLimitError",
    "UpstreamError",
    "UsageLimitError",
    "ValidationError",
    "configure_logging",
    "gather_named",
    "get_logger",
    "parse_json_reply",
]
