"""Error kinds raised by services and rendered by the API layer."""

from typing import Any, Dict, Optional
from fastapi import status


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response.

    Attributes:
        message: Short, client-safe error string
        details: Optional diagnostic text (only rendered for 5xx responses)
        error_type: Error type reported by the upstream service, if any
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[str] = None,
        error_type: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.details = details
        self.error_type = error_type
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details and self.status_code >= 500:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class InvalidSession(Unauthenticated):
    """The session cookie was present but rejected; the cookie must be cleared."""

    default_message = "Invalid session"


class PermissionDenied(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class RateLimited(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        limit: Optional[int] = None,
        remaining: Optional[int] = None,
        reset: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.limit = limit
        self.remaining = remaining
        self.reset = reset

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        body.update({"limit": self.limit, "remaining": self.remaining, "reset": self.reset})
        return body


class UpstreamFailure(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


class ServerMisconfigured(UpstreamFailure):
    """Required configuration is missing; the message is safe to show as-is."""

    default_message = "Server mis-configuration"


# Upstream HTTP status -> error kind. Anything else is an UpstreamFailure.
_STATUS_TO_ERROR = {
    status.HTTP_400_BAD_REQUEST: ValidationError,
    status.HTTP_401_UNAUTHORIZED: Unauthenticated,
    status.HTTP_403_FORBIDDEN: PermissionDenied,
    status.HTTP_404_NOT_FOUND: NotFound,
    status.HTTP_409_CONFLICT: Conflict,
    status.HTTP_429_TOO_MANY_REQUESTS: RateLimited,
}


def error_for_status(status_code: Optional[int], message: str, error_type: Optional[str] = None) -> ApiError:
    """Build the error kind matching an upstream status code (None for transport failures)."""
    error_cls = _STATUS_TO_ERROR.get(status_code, UpstreamFailure)
    return error_cls(message, details=message, error_type=error_type)


def wrap_unexpected(message: str, exc: Exception) -> ApiError:
    """Turn an unanticipated failure into a generic 500 that keeps the raw text in ``details``."""
    if isinstance(exc, ServerMisconfigured):
        return exc
    if isinstance(exc, ApiError):
        return UpstreamFailure(message, details=exc.details or exc.message, error_type=exc.error_type)
    return UpstreamFailure(message, details=str(exc))
