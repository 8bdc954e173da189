"""
Custom exception classes for the Google Slides MCP server.
Every tool failure is reported through one of a small, closed set of error kinds.
"""

import json
from typing import Optional, Dict, Any

from googleapiclient.errors import HttpError


class SlidesToolError(Exception):
    """Base exception for all tool errors."""

    error_code = "TOOL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None
    ):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code (defaults to the class code)
            details: Additional error details
            cause: Original exception that triggered this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error for a tool response."""
        payload: Dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(SlidesToolError):
    """Raised when a presentation, slide, object or comment does not exist."""

    error_code = "NOT_FOUND"


class ForbiddenError(SlidesToolError):
    """Raised when the caller has no access to the resource."""

    error_code = "FORBIDDEN"


class InvalidArgumentError(SlidesToolError):
    """Raised when tool input fails validation."""

    error_code = "INVALID_ARGUMENT"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            value: Value that failed validation
            **kwargs: Additional arguments for SlidesToolError
        """
        details = kwargs.pop("details", None) or {}
        if field is not None:
            details["field"] = field
        if value is not None and isinstance(value, (str, int, float, bool)):
            details["value"] = value
        super().__init__(message, details=details, **kwargs)
        self.field = field
        self.value = value


class RemoteAPIError(SlidesToolError):
    """Raised when a Slides or Drive call fails for any other reason."""

    error_code = "REMOTE_API_FAILURE"

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        **kwargs
    ):
        """
        Initialize remote API error.

        Args:
            message: Error message
            status: HTTP status returned by the remote API, if known
            **kwargs: Additional arguments for SlidesToolError
        """
        details = kwargs.pop("details", None) or {}
        if status is not None:
            details["status"] = status
        super().__init__(message, details=details, **kwargs)
        self.status = status


class UnsupportedError(SlidesToolError):
    """Raised when a requested feature cannot be performed through the API."""

    error_code = "UNSUPPORTED"


class ConfigurationError(SlidesToolError):
    """Raised when configuration is invalid or missing."""

    error_code = "CONFIGURATION_ERROR"

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that is invalid
            **kwargs: Additional arguments for SlidesToolError
        """
        super().__init__(message, **kwargs)
        self.config_key = config_key


class EncodingError(SlidesToolError):
    """Raised when an in-memory image encoder cannot produce valid output."""

    error_code = "ENCODING_ERROR"


NOT_FOUND_MARKERS = ("404", "notfound", "not found")
FORBIDDEN_MARKERS = ("403", "forbidden", "access denied", "permission denied")


def _http_error_message(error: HttpError) -> str:
    """Extract the API message from an HttpError body."""
    try:
        body = json.loads(error.content.decode())
        return body.get("error", {}).get("message") or str(error)
    except (ValueError, AttributeError, UnicodeDecodeError):
        return str(error)


def _error_text(error: BaseException) -> str:
    if isinstance(error, HttpError):
        return _http_error_message(error).lower()
    return str(error).lower()


def is_not_found(error: BaseException) -> bool:
    """Check whether an exception describes a missing resource."""
    if isinstance(error, NotFoundError):
        return True
    if isinstance(error, HttpError) and error.resp.status == 404:
        return True
    text = _error_text(error)
    return any(marker in text for marker in NOT_FOUND_MARKERS)


def is_forbidden(error: BaseException) -> bool:
    """Check whether an exception describes an access failure."""
    if isinstance(error, ForbiddenError):
        return True
    if isinstance(error, HttpError) and error.resp.status == 403:
        return True
    text = _error_text(error)
    return any(marker in text for marker in FORBIDDEN_MARKERS)


def map_remote_error(
    error: BaseException,
    resource: str = "presentation",
    action: str = "call remote API"
) -> SlidesToolError:
    """
    Translate a remote failure into the tool error taxonomy.

    Args:
        error: Exception raised by a Slides or Drive call
        resource: Human-readable name of the resource involved
        action: What was being attempted, used in the fallback message

    Returns:
        SlidesToolError subclass instance wrapping the original error
    """
    if isinstance(error, SlidesToolError):
        return error

    if isinstance(error, HttpError):
        status = error.resp.status
        detail = _http_error_message(error)
    else:
        status = None
        detail = str(error)

    if is_not_found(error):
        return NotFoundError(f"{resource} not found: {detail}", cause=error)
    if is_forbidden(error):
        return ForbiddenError(f"access denied to {resource}: {detail}", cause=error)
    return RemoteAPIError(f"failed to {action}: {detail}", status=status, cause=error)
