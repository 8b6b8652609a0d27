"""
Error taxonomy for the guide generation pipeline.

Every error carries the machine-readable ``code`` and the HTTP status the
trigger view responds with. ``retryable`` decides whether the text
generation backoff loop attempts the call again.
"""
from typing import Optional


class PipelineError(Exception):
    """Base class for errors surfaced by a pipeline run."""
    code = "INTERNAL_ERROR"
    http_status = 500
    retryable = False
    default_message = "Failed to generate guide"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details or ""
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            'error': self.message,
            'code': self.code,
            'details': self.details,
        }


class InvalidInput(PipelineError):
    code = "INVALID_INPUT"
    http_status = 400
    default_message = "Missing required parameters"


class MissingCredentials(PipelineError):
    code = "MISSING_API_KEY"
    http_status = 500
    default_message = "AI service is not properly configured"


class RateLimited(PipelineError):
    code = "RATE_LIMIT_EXCEEDED"
    http_status = 429
    retryable = True
    default_message = "Too many requests, please try again later"


class AuthenticationFailed(PipelineError):
    code = "INVALID_API_KEY"
    http_status = 401
    default_message = "AI service authentication failed"


class UpstreamServiceError(PipelineError):
    code = "EXTERNAL_API_ERROR"
    http_status = 502
    retryable = True
    default_message = "AI service is temporarily unavailable"

    def __init__(self, message=None, details=None, retryable: bool = True):
        super().__init__(message, details)
        self.retryable = retryable


class ParseError(PipelineError):
    code = "PARSE_ERROR"
    http_status = 500
    default_message = "AI service returned an unreadable guide"


class StorageError(PipelineError):
    code = "DATABASE_ERROR"
    http_status = 500
    default_message = "Failed to save guide"


def error_for_status(status_code: int, details: str = "") -> PipelineError:
    """Map an upstream HTTP status to the matching pipeline error."""
    if status_code == 429:
        return RateLimited(details=details)
    if status_code in (401, 403):
        return AuthenticationFailed(details=details)
    if status_code >= 500:
        return UpstreamServiceError(details=details)
    # Other client errors won't change on retry
    return UpstreamServiceError(details=details, retryable=False)
