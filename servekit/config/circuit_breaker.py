"""Circuit breaker policy configuration.

Only the thresholds and classifiers of the breaker live here. The breaker a
consumer builds around them is expected to run the usual three-state
machine, independently for every key produced by ``key_extractor``:

- **Closed -> Open** after ``failure_threshold`` consecutive failures, each
  classified by ``is_failure(request, status_code)``
- **Open**: requests are answered immediately with ``open_status_code`` and
  ``open_message`` without reaching the downstream handler
- **Open -> Half-Open** once ``recovery_timeout`` has elapsed
- **Half-Open -> Closed** after ``success_threshold`` consecutive successes;
  any failure while half-open reopens the circuit
"""

from datetime import timedelta

from pydantic import Field
from starlette import status
from starlette.requests import Request

from servekit.config.options import Option, OptionsModel, replace_field
from servekit.core.types import FailureClassifier, KeyExtractor

SERVER_ERROR_THRESHOLD = 500


def default_failure_classifier(request: Request, status_code: int) -> bool:
    """Treat every 5xx response as a failure."""
    _ = request
    return status_code >= SERVER_ERROR_THRESHOLD


def path_key_extractor(request: Request) -> str:
    """Keep one circuit per request path."""
    return request.url.path


class CircuitBreakerConfig(OptionsModel):
    """Circuit breaker settings."""

    failure_threshold: int = Field(
        default=5,
        description="Consecutive failures before the circuit opens",
    )
    recovery_timeout: timedelta = Field(
        default=timedelta(seconds=30),
        description="Time an open circuit waits before going half-open",
    )
    success_threshold: int = Field(
        default=3,
        description="Consecutive half-open successes before the circuit closes",
    )
    is_failure: FailureClassifier | None = Field(
        default=default_failure_classifier,
        description="Decides whether a response counts as a failure",
    )
    key_extractor: KeyExtractor | None = Field(
        default=path_key_extractor,
        description="Function mapping a request to its circuit",
    )
    open_status_code: int = Field(
        default=status.HTTP_503_SERVICE_UNAVAILABLE,
        description="Status code returned while the circuit is open",
    )
    open_message: str = Field(
        default="Service temporarily unavailable",
        description="Body returned while the circuit is open",
    )


type CircuitBreakerOption = Option[CircuitBreakerConfig]


def default_circuit_breaker_config() -> CircuitBreakerConfig:
    """Return a fresh circuit breaker configuration with default values."""
    return CircuitBreakerConfig()


def with_circuit_breaker_failure_threshold(threshold: int) -> CircuitBreakerOption:
    """Set the consecutive failures needed to open the circuit."""
    return replace_field("failure_threshold", threshold)


def with_circuit_breaker_recovery_timeout(
    timeout: timedelta,
) -> CircuitBreakerOption:
    """Set how long an open circuit waits before going half-open."""
    return replace_field("recovery_timeout", timeout)


def with_circuit_breaker_success_threshold(threshold: int) -> CircuitBreakerOption:
    """Set the consecutive successes needed to close a half-open circuit."""
    return replace_field("success_threshold", threshold)


def with_circuit_breaker_is_failure(
    is_failure: FailureClassifier | None,
) -> CircuitBreakerOption:
    """Set the function deciding whether a response is a failure."""
    return replace_field("is_failure", is_failure)


def with_circuit_breaker_key_extractor(
    key_extractor: KeyExtractor | None,
) -> CircuitBreakerOption:
    """Set the function mapping a request to its circuit."""
    return replace_field("key_extractor", key_extractor)


def with_circuit_breaker_open_status_code(status_code: int) -> CircuitBreakerOption:
    """Set the status code returned while the circuit is open."""
    return replace_field("open_status_code", status_code)


def with_circuit_breaker_open_message(message: str) -> CircuitBreakerOption:
    """Set the body returned while the circuit is open."""
    return replace_field("open_message", message)
