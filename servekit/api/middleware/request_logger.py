"""HTTP request logging middleware.

One "Request completed" entry is written per request, carrying the fields
selected in the configuration. The level follows the response status when
``log_errors`` is enabled:

- **5xx**: ERROR
- **4xx**: WARNING
- **anything else**: INFO
"""

import time
from typing import Any

from loguru import logger
from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servekit.api.utils.paths import is_exempt
from servekit.config.real_ip import default_ip_extractor, remote_addr
from servekit.config.request_logger import (
    LogField,
    RequestLoggerConfig,
    default_log_fields,
    default_request_logger_config,
)
from servekit.core.constants import REQUEST_ID_HEADER

_DURATION_UNITS = (
    (1_000_000_000, "s"),
    (1_000_000, "ms"),
    (1_000, "µs"),
)


def humanize_duration(duration_ns: int) -> str:
    """Render a duration with the largest unit that keeps it above one.

    Examples:
        >>> humanize_duration(1_500_000)
        '1.5ms'
        >>> humanize_duration(750)
        '750ns'
    """
    for factor, unit in _DURATION_UNITS:
        if duration_ns >= factor:
            return f"{duration_ns / factor:g}{unit}"
    return f"{duration_ns}ns"


def request_uri(request: Request) -> str:
    """Return the request target as sent by the client (path and query)."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def log_level_for(status_code: int, *, log_errors: bool) -> str:
    """Pick the log level for a completed request."""
    if not log_errors:
        return "INFO"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "ERROR"
    if status_code >= status.HTTP_400_BAD_REQUEST:
        return "WARNING"
    return "INFO"


def collect_fields(
    request: Request,
    fields: set[LogField],
    status_code: int,
    duration_ns: int,
) -> dict[str, Any]:
    """Gather the selected log fields for a request.

    Args:
        request: The completed request.
        fields: The fields to include.
        status_code: Response status code.
        duration_ns: Handling time in nanoseconds.

    Returns:
        dict[str, Any]: Field name to value, in ``LogField`` order.
    """
    values: dict[LogField, Any] = {
        LogField.METHOD: request.method,
        LogField.URI: request_uri(request),
        LogField.PATH: request.url.path or "/",
        LogField.HOST: request.headers.get("host", ""),
        LogField.PROTOCOL: f"HTTP/{request.scope.get('http_version', '1.1')}",
        LogField.REFERER: request.headers.get("referer", ""),
        LogField.USER_AGENT: request.headers.get("user-agent", ""),
        LogField.STATUS: status_code,
        LogField.DURATION_NS: duration_ns,
        LogField.DURATION_HUMAN: humanize_duration(duration_ns),
        LogField.REMOTE_ADDR: remote_addr(request),
        LogField.CLIENT_IP: default_ip_extractor(request),
    }
    if request_id := request.headers.get(REQUEST_ID_HEADER):
        values[LogField.REQUEST_ID] = request_id

    return {
        field.value: values[field]
        for field in LogField
        if field in fields and field in values
    }


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Middleware for logging completed HTTP requests.

    Exceptions from the application propagate unlogged here; the recover
    middleware reports them.

    Args:
        app: The ASGI application.
        config: Request logger configuration. ``fields=None`` logs every field.
        log: Logger to write to, defaults to the Loguru logger.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        config: RequestLoggerConfig | None = None,
        log: Any = None,
    ) -> None:
        super().__init__(app)
        self.config = config or default_request_logger_config()
        fields = self.config.fields
        self.fields = set(default_log_fields() if fields is None else fields)
        self.exempt_paths = list(self.config.exempt_paths or ())
        self.log = log or logger

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request and log its completion.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: The response from the application.
        """
        if is_exempt(request.url.path, self.exempt_paths):
            return await call_next(request)

        start = time.perf_counter_ns()
        response = await call_next(request)
        duration_ns = time.perf_counter_ns() - start

        level = log_level_for(response.status_code, log_errors=self.config.log_errors)
        self.log.bind(
            **collect_fields(request, self.fields, response.status_code, duration_ns)
        ).log(level, "Request completed")

        return response
