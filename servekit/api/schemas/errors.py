"""Standardized error response schemas.

Every error produced by servekit, whether raised by a middleware or by the
application behind it, reaches the client in the same shape:

- **ErrorResponse**: Error code, message, details and request ID
- **ServiceInfo**: Service identification for multi-service debugging
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceInfo(BaseModel):
    """Service information for error context."""

    name: str = Field(
        ...,
        description="Name of the service",
        examples=["servekit"],
    )

    version: str = Field(
        ...,
        description="Version of the service",
        examples=["0.1.0"],
    )

    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["VALIDATION_ERROR", "PAYLOAD_TOO_LARGE", "UNAUTHORIZED"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Request body too large", "Unauthorized"],
    )

    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details (e.g., field-specific validation errors)",
        examples=[{"max_bytes": 1048576, "content_length": 2097152}],
    )

    request_id: str | None = Field(
        default=None,
        description="Request identifier echoed in the X-Request-Id header",
        examples=["4f9c2b7e1d3a46b08e5f7a9c0b1d2e3f"],
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
        examples=["2026-01-14T12:00:00+00:00"],
    )

    severity: str | None = Field(
        default=None,
        description="Error severity level (LOW, MEDIUM, HIGH, CRITICAL)",
        examples=["LOW", "CRITICAL"],
    )

    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )

    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated in development environments)",
        examples=[{"exception_type": "ValueError", "stack_trace": ["..."]}],
    )
