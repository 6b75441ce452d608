"""Request timeout middleware."""

import asyncio

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from servekit.api.utils.paths import is_exempt
from servekit.config.timeout import TimeoutConfig, default_timeout_config


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Answer with ``status_code`` when the application is too slow.

    The timeout covers the time until the application starts its response.
    A non-positive timeout or a zero status code falls back to the default.

    Args:
        app: The ASGI application.
        config: Timeout configuration.
    """

    def __init__(self, app: ASGIApp, *, config: TimeoutConfig | None = None) -> None:
        super().__init__(app)
        config = config or default_timeout_config()
        defaults = default_timeout_config()
        self.timeout = config.timeout
        if self.timeout.total_seconds() <= 0:
            self.timeout = defaults.timeout
        self.status_code = config.status_code or defaults.status_code
        self.message = config.message
        self.exempt_paths = list(config.exempt_paths or ())

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Call the application under a deadline."""
        if is_exempt(request.url.path, self.exempt_paths):
            return await call_next(request)

        try:
            async with asyncio.timeout(self.timeout.total_seconds()):
                return await call_next(request)
        except TimeoutError:
            logger.warning(
                "Request timed out",
                path=request.url.path,
                timeout_seconds=self.timeout.total_seconds(),
            )
            return PlainTextResponse(self.message, status_code=self.status_code)
