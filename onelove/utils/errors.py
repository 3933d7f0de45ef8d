"""Custom exception hierarchy for the One Love service layer.

All application exceptions inherit from :class:`OneLoveError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "supabase", "ai-gateway", "sqlite") caused the
failure, and an ``http_status`` the API middleware uses for the response.

    OneLoveError  (base -- catch-all, 500)
    +-- ValidationError      (bad/missing action or payload, 400)
    +-- AuthRequiredError    (caller must be signed in, 401)
    +-- NotFoundError        (record does not exist, 404)
    +-- BackendError         (managed database read/write failure, 500)
    +-- ConfigurationError   (missing credential / config, 500)
    +-- ParseError           (AI reply not valid JSON -- recovered locally)
    +-- UpstreamError        (AI provider returned non-2xx, 500)
        +-- RateLimitError   (provider rate limit, 429)
        +-- UsageLimitError  (provider credits exhausted, 402)
"""


class OneLoveError(Exception):
    """Base exception for all One Love errors.

    ``__str__`` prefixes the provider name in brackets for log output,
    e.g. ``[supabase] update failed``.  The ``message`` property is what
    callers see in ``{"error": ...}`` payloads.
    """

    http_status: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------

class ValidationError(OneLoveError):
    """Raised when a request body is malformed or names an unknown action."""

    http_status = 400

    def __init__(
        self,
        message: str = "Invalid request",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AuthRequiredError(OneLoveError):
    """Raised when an operation needs a signed-in user and none was given."""

    http_status = 401

    def __init__(
        self,
        message: str = "Authorization required",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotFoundError(OneLoveError):
    """Raised when a requested record does not exist in the backend."""

    http_status = 404

    def __init__(
        self,
        message: str = "Record not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Backend / configuration errors
# ---------------------------------------------------------------------------

class BackendError(OneLoveError):
    """Raised when a managed-database read or write fails.

    Fatal to the request: handlers never suppress a partial result.
    """

    def __init__(
        self,
        message: str = "Backend operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(OneLoveError):
    """Raised when configuration is invalid or a credential is missing."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ParseError(OneLoveError):
    """Raised when an AI reply cannot be parsed as the expected JSON.

    Always recovered where it is raised (regex fallback); never reaches
    the API layer.
    """

    def __init__(
        self,
        message: str = "AI response was not valid JSON",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# AI provider errors
# ---------------------------------------------------------------------------

class UpstreamError(OneLoveError):
    """Raised when the AI provider call fails or returns a non-2xx status.

    ``status_code`` holds the provider's HTTP status when one was received.
    """

    def __init__(
        self,
        message: str = "AI provider call failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._status_code = status_code

    @property
    def status_code(self) -> int | None:
        return self._status_code


class RateLimitError(UpstreamError):
    """Raised when the AI provider answers 429."""

    http_status = 429

    def __init__(
        self,
        message: str = "Rate limit exceeded, please try again later.",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=429)


class UsageLimitError(UpstreamError):
    """Raised when the AI provider answers 402 (credits exhausted)."""

    http_status = 402

    def __init__(
        self,
        message: str = "AI usage limit reached.",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=402)
