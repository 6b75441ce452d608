"""Rate limiting policy configuration.

This module only carries the tunable contract of a rate limiter; the
accounting itself (token refill, window boundaries, burst tolerance) belongs
to whichever limiter consumes it.

The contract a limiter must honor:
- **Budget**: ``rate`` requests are permitted per ``window``
- **Strategy**: ``algorithm`` names the accounting strategy to use
- **Partitioning**: ``key_extractor`` maps a request to the bucket it
  draws from (global, per IP, per user, per path, or any combination)
- **Rejection**: over-limit requests get ``status_code`` and ``message``,
  with rate limit response headers when ``include_headers`` is set
- **Exemptions**: requests whose path matches an entry of ``exempt_paths``
  (exactly, or below it when the entry ends in ``/``) bypass the limiter

Zero or negative budgets, a ``None`` extractor and an empty message are all
accepted as configuration values.
"""

from datetime import timedelta
from enum import StrEnum

from pydantic import Field
from starlette import status
from starlette.requests import Request

from servekit.config.options import Option, OptionsModel, replace_field
from servekit.config.real_ip import remote_addr
from servekit.core.types import KeyExtractor


class RateLimitAlgorithm(StrEnum):
    """Named rate limit accounting strategies."""

    TOKEN_BUCKET = "token_bucket"
    SLIDING_WINDOW = "sliding_window"
    FIXED_WINDOW = "fixed_window"


def default_key_extractor(request: Request) -> str:
    """Partition by client address.

    Returns the ``X-Forwarded-For`` header verbatim when present, otherwise
    the peer address including its port.

    Args:
        request: The incoming request.

    Returns:
        str: The rate limit key.
    """
    if xff := request.headers.get("x-forwarded-for"):
        return xff
    return remote_addr(request)


class RateLimitConfig(OptionsModel):
    """Rate limiting settings."""

    rate: int = Field(default=100, description="Requests permitted per window")
    window: timedelta = Field(
        default=timedelta(minutes=1),
        description="Length of the accounting window",
    )
    algorithm: RateLimitAlgorithm = Field(
        default=RateLimitAlgorithm.TOKEN_BUCKET,
        description="Accounting strategy",
    )
    key_extractor: KeyExtractor | None = Field(
        default=default_key_extractor,
        description="Function mapping a request to its rate limit key",
    )
    status_code: int = Field(
        default=status.HTTP_429_TOO_MANY_REQUESTS,
        description="Status code returned when the limit is exceeded",
    )
    message: str = Field(
        default="Rate limit exceeded",
        description="Body returned when the limit is exceeded",
    )
    include_headers: bool = Field(
        default=True,
        description="Whether to add rate limit headers to responses",
    )
    exempt_paths: list[str] | None = Field(
        default_factory=list,
        description="Paths that skip rate limiting",
    )


type RateLimitOption = Option[RateLimitConfig]


def default_rate_limit_config() -> RateLimitConfig:
    """Return a fresh rate limit configuration with default values."""
    return RateLimitConfig()


def with_rate_limit_rate(rate: int) -> RateLimitOption:
    """Set the number of requests permitted per window."""
    return replace_field("rate", rate)


def with_rate_limit_window(window: timedelta) -> RateLimitOption:
    """Set the accounting window duration."""
    return replace_field("window", window)


def with_rate_limit_algorithm(algorithm: RateLimitAlgorithm) -> RateLimitOption:
    """Set the accounting strategy."""
    return replace_field("algorithm", algorithm)


def with_rate_limit_key_extractor(
    key_extractor: KeyExtractor | None,
) -> RateLimitOption:
    """Set the function mapping a request to its rate limit key."""
    return replace_field("key_extractor", key_extractor)


def with_rate_limit_status_code(status_code: int) -> RateLimitOption:
    """Set the status code returned when the limit is exceeded."""
    return replace_field("status_code", status_code)


def with_rate_limit_message(message: str) -> RateLimitOption:
    """Set the body returned when the limit is exceeded."""
    return replace_field("message", message)


def with_rate_limit_include_headers(include: bool) -> RateLimitOption:
    """Set whether rate limit headers are added to responses."""
    return replace_field("include_headers", include)


def with_rate_limit_exempt_paths(paths: list[str] | None) -> RateLimitOption:
    """Set the paths that skip rate limiting."""
    return replace_field("exempt_paths", paths)
