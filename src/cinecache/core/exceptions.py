"""Custom exception hierarchy for CineCache.

Every failure in the fetch/cache layer is scoped to a single request key and
is recoverable by retrying. The hierarchy carries:
- Machine-readable error codes
- HTTP status code mapping for the API layer
- Structured details for logging and error envelopes

Usage:
    from cinecache.core.exceptions import HttpError

    raise HttpError(status=404, endpoint_path="/movie/0")
"""

from typing import Any


class CineCacheError(Exception):
    """Base exception for all CineCache errors.

    Attributes:
        code: Machine-readable error code (e.g., "HTTP_ERROR")
        message: Human-readable error message
        status_code: HTTP status code to return
        details: Additional error details (optional)
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message:
            self.message = message
        if code:
            self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self, request_id: str | None = None) -> dict[str, Any]:
        """Convert exception to API error response format.

        Args:
            request_id: Request correlation ID

        Returns:
            Error response dictionary
        """
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if request_id:
            error["request_id"] = request_id
        if self.details:
            error["details"] = self.details
        return {"error": error}


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(CineCacheError):
    """Raised when caller input is invalid."""

    code: str = "VALIDATION_ERROR"
    message: str = "Validation error"
    status_code: int = 400

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if details is None:
            details = {}
        if field:
            details["field"] = field
        super().__init__(message=message, details=details if details else None)


# =============================================================================
# Remote API Errors (502, 503)
# =============================================================================


class ExternalServiceError(CineCacheError):
    """Base class for failures talking to the remote metadata API."""

    code: str = "EXTERNAL_SERVICE_ERROR"
    message: str = "External service error"
    status_code: int = 502


class NetworkError(ExternalServiceError):
    """Transport failure: no HTTP response was received.

    Covers DNS failures, refused connections and timeouts.
    """

    code: str = "NETWORK_ERROR"
    message: str = "Could not reach the metadata service"
    status_code: int = 503

    def __init__(
        self,
        cause: BaseException | None = None,
        endpoint_path: str | None = None,
        message: str | None = None,
    ) -> None:
        self.cause = cause
        self.endpoint_path = endpoint_path
        details: dict[str, Any] = {}
        if endpoint_path:
            details["endpoint"] = endpoint_path
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
            if not message:
                message = f"Request failed: {cause}"
        super().__init__(message=message, details=details if details else None)


class HttpError(ExternalServiceError):
    """The remote API answered with a non-2xx status."""

    code: str = "HTTP_ERROR"
    message: str = "Metadata service returned an error"

    def __init__(
        self,
        status: int,
        endpoint_path: str,
        message: str | None = None,
    ) -> None:
        self.status = status
        self.endpoint_path = endpoint_path
        if not message:
            message = f"HTTP error {status} for {endpoint_path}"
        super().__init__(
            message=message,
            details={"status": status, "endpoint": endpoint_path},
        )


class InvalidResponseError(ExternalServiceError):
    """The response does not match the expected array/object shape."""

    code: str = "INVALID_RESPONSE"
    message: str = "Invalid response from metadata service"

    def __init__(
        self,
        message: str | None = None,
        endpoint_path: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if endpoint_path:
            details["endpoint"] = endpoint_path
        super().__init__(message=message, details=details if details else None)


# =============================================================================
# Empty Results (404)
# =============================================================================


class EmptyResultError(CineCacheError):
    """A well-formed response held no usable items after filtering."""

    code: str = "EMPTY_RESULT"
    message: str = "No items to display"
    status_code: int = 404

    def __init__(self, message: str | None = None, source: str | None = None) -> None:
        details: dict[str, Any] = {}
        if source:
            details["source"] = source
        super().__init__(message=message, details=details if details else None)
