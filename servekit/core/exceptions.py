"""Structured exception hierarchy for consistent error handling.

This module defines the exceptions raised by servekit itself. Configuration
models never raise; errors come from the middlewares rejecting a request and
from settings that cannot be turned into a server configuration.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **ServekitError**: Base exception with context, chaining and fingerprinting
- **Specialized exceptions**: One type per rejection reason

Every exception carries the HTTP status it maps to, so the handlers in
``servekit.api.middleware.error_handler`` can answer without a lookup table.
"""

import hashlib
import traceback
from enum import Enum
from typing import Any

from starlette import status


class ErrorCode(Enum):
    """Standardized error codes for servekit.

    These error codes provide consistent identification of error types
    across the toolkit, enabling proper error handling and monitoring.
    """

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Settings could not be turned into a valid server configuration."""

    # Request errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    """The request body exceeds the configured size limit."""

    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    """The request body uses a content type that is not accepted."""

    # Authentication errors
    UNAUTHORIZED = "UNAUTHORIZED"
    """Authentication failed or credentials are missing."""


class Severity(Enum):
    """Severity levels for servekit errors.

    These severity levels help categorize the impact and urgency of errors,
    enabling appropriate handling, monitoring, and alerting strategies.
    """

    LOW = "LOW"
    """Low severity errors caused by normal client behavior."""

    MEDIUM = "MEDIUM"
    """Medium severity errors that may affect some features but not critical ops."""

    HIGH = "HIGH"
    """High severity errors impacting critical functionality or security."""

    CRITICAL = "CRITICAL"
    """Critical errors requiring immediate attention, may cause system failures."""


class ServekitError(Exception):
    """Base exception class for all servekit exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Capture stack trace at creation time
        self.stack_trace = traceback.format_stack()[:-1]  # Exclude this frame

        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for error grouping.

        Creates a hash based on the error type and the servekit frames where
        it was raised, so repeated errors from one location group together.

        Returns:
            str: A hash string for error grouping
        """
        max_frames = 5
        relevant_frames = self.stack_trace[-max_frames:]

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"
        for frame in relevant_frames:
            if "site-packages" not in frame and "servekit/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether this error is part of normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Whether this error should trigger alerts (HIGH or CRITICAL)."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        """Return a string representation of the exception.

        Returns:
            str: A formatted string containing the error code and message
        """
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the exception.

        Returns:
            str: A string showing the class name, error code, message, severity,
                and context
        """
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class UnauthorizedError(ServekitError):
    """Exception raised when basic authentication fails.

    Args:
        message: Description of the authentication failure
        realm: Realm advertised in the WWW-Authenticate challenge
        context: Additional context information about the error
    """

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(
        self,
        message: str = "Unauthorized",
        realm: str = "Restricted",
        context: dict[str, Any] | None = None,
    ) -> None:
        self.realm = realm
        super().__init__(ErrorCode.UNAUTHORIZED, message, Severity.LOW, context)

    @property
    def challenge(self) -> str:
        """The WWW-Authenticate header value for this error."""
        return f'Basic realm="{self.realm}"'


class PayloadTooLargeError(ServekitError):
    """Exception raised when a request body exceeds the size limit.

    Args:
        max_bytes: The configured limit
        content_length: The size announced by the client
    """

    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def __init__(self, max_bytes: int, content_length: int) -> None:
        super().__init__(
            ErrorCode.PAYLOAD_TOO_LARGE,
            "Request body too large",
            Severity.LOW,
            {"max_bytes": max_bytes, "content_length": content_length},
        )


class UnsupportedMediaTypeError(ServekitError):
    """Exception raised when a request body is sent in a disallowed form.

    Args:
        value: The offending value sent by the client
        allowed: The values the endpoint accepts
        field: Name of the rejected request property, such as
            ``content_type``, ``charset`` or ``content_encoding``
    """

    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    def __init__(
        self, value: str, allowed: list[str], *, field: str = "content_type"
    ) -> None:
        super().__init__(
            ErrorCode.UNSUPPORTED_MEDIA_TYPE,
            "Unsupported media type",
            Severity.LOW,
            {field: value, "allowed": allowed},
        )


class ConfigurationError(ServekitError):
    """Exception raised when settings cannot produce a server configuration.

    Args:
        message: Description of the invalid setting
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.CONFIGURATION_ERROR, message, Severity.CRITICAL, context, cause
        )
