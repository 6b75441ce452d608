"""Request timeout configuration."""

from datetime import timedelta

from pydantic import Field
from starlette import status

from servekit.config.options import Option, OptionsModel, replace_field


class TimeoutConfig(OptionsModel):
    """Request timeout settings."""

    timeout: timedelta = Field(
        default=timedelta(seconds=30),
        description="Maximum time a handler may take",
    )
    status_code: int = Field(
        default=status.HTTP_504_GATEWAY_TIMEOUT,
        description="Status code returned on timeout",
    )
    message: str = Field(default="", description="Body returned on timeout")
    exempt_paths: list[str] | None = Field(
        default_factory=list,
        description="Paths that skip timeout enforcement",
    )


type TimeoutOption = Option[TimeoutConfig]


def default_timeout_config() -> TimeoutConfig:
    """Return a fresh timeout configuration with default values."""
    return TimeoutConfig()


def with_timeout_duration(timeout: timedelta) -> TimeoutOption:
    """Set the maximum time a handler may take."""
    return replace_field("timeout", timeout)


def with_timeout_status_code(status_code: int) -> TimeoutOption:
    """Set the status code returned on timeout."""
    return replace_field("status_code", status_code)


def with_timeout_message(message: str) -> TimeoutOption:
    """Set the body returned on timeout."""
    return replace_field("message", message)


def with_timeout_exempt_paths(paths: list[str] | None) -> TimeoutOption:
    """Set the paths that skip timeout enforcement."""
    return replace_field("exempt_paths", paths)
