"""
EduMate Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure the backend reports.
How:   Each exception class carries a message, an optional context dict, and
       the HTTP status / machine-readable code the REST layer renders it with.
Who:   Raised by the generation client and the services; rendered by the
       global handlers in main.py or by the AI routes' result envelope.

Exception Hierarchy:
    EduMateError (base)
    ├── InvalidInputError          → 400 (caller fixes the input and retries)
    ├── NotFoundError              → 404
    ├── ConfigurationError         → 503 (operator must set the API key)
    ├── GenerationServiceError     → 502 (the model endpoint let us down)
    │   ├── TransportError         → non-200 status or network failure
    │   ├── UpstreamError          → the model returned an error payload
    │   └── MalformedResponseError → response violates the expected shape
    ├── DatabaseError              → 500
    └── RateLimitExceededError     → 429

None of these are retried inside the backend; the generation client makes
exactly one attempt per operation.
"""

from typing import Any, Dict, Optional


class EduMateError(Exception):
    """
    Base exception for all EduMate application errors.

    Attributes:
        message:  Error description. Safe to return to the client only when
                  `expose_message` is true; otherwise `public_message` is used.
        context:  Additional debug info (logged, returned only as `details`
                  for client-facing errors)
    """

    status_code: int = 500
    error_code: str = "server_error"
    # When False, clients see `public_message` and `message` goes to the logs only
    expose_message: bool = True
    public_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def client_message(self) -> str:
        return self.message if self.expose_message else self.public_message


class InvalidInputError(EduMateError):
    """
    Raised when caller-supplied arguments fail validation.

    When:    Note content missing/too short, item count not positive,
             neither inline content nor a note id supplied.
    HTTP:    400 Bad Request
    """

    status_code = 400
    error_code = "invalid_input"

    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(EduMateError):
    """
    Raised when a requested note or project does not exist.

    SQLAlchemy returns None for missing records; services convert that into
    this exception so the route can answer 404.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConfigurationError(EduMateError):
    """
    Raised before any network call when the Gemini API key is absent or
    still holds the placeholder value. Never retryable by the caller.
    """

    status_code = 503
    error_code = "configuration_error"
    expose_message = False
    public_message = "AI generation is not configured on this server"

    def __init__(
        self,
        message: str = "Gemini API key is not configured. Set GEMINI_API_KEY.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class GenerationServiceError(EduMateError):
    """Base for failures reported by (or while talking to) the model endpoint."""

    status_code = 502
    error_code = "generation_error"
    expose_message = False
    public_message = "The AI service could not complete the request"


class TransportError(GenerationServiceError):
    """
    Raised when the model endpoint answers with a non-200 status, or the
    request never completes (connect failure, timeout).

    The message carries the status code and raw body for operator diagnosis;
    clients get `public_message`.
    """

    error_code = "transport_error"

    def __init__(
        self,
        message: str = "Gemini API request failed",
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["http_status"] = status_code
        if body:
            ctx["body"] = body
        super().__init__(message=message, context=ctx)
        self.http_status = status_code
        self.body = body


class UpstreamError(GenerationServiceError):
    """
    Raised when the model service returned an `error` object instead of
    candidates. Its message is surfaced verbatim.
    """

    error_code = "upstream_error"
    expose_message = True

    def __init__(
        self,
        message: str = "Unknown API error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MalformedResponseError(GenerationServiceError):
    """
    Raised when the response body is not JSON, or carries neither
    candidates nor an error object. The raw body rides along in `context`.
    """

    error_code = "malformed_response"

    def __init__(
        self,
        message: str = "Unexpected response format from Gemini API",
        raw_body: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["raw_body"] = raw_body
        super().__init__(message=message, context=ctx)
        self.raw_body = raw_body


class DatabaseError(EduMateError):
    """
    Raised when database operations fail unexpectedly.

    The client message is always generic; query details are logged only.
    """

    status_code = 500
    error_code = "server_error"
    expose_message = False
    public_message = "An internal error occurred. Please try again later."

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(EduMateError):
    """
    A client exceeded the per-IP generation rate limit.

    RateLimitMiddleware answers before routing, so it renders the 429 body
    from this class itself instead of raising it.
    """

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
