"""No-cache middleware.

Conditional request headers are removed before the application runs, so it
always produces a full response, and the response is marked as not
cacheable by browsers, HTTP/1.0 caches and nginx.
"""

from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servekit.config.no_cache import (
    NoCacheConfig,
    default_etag_headers,
    default_no_cache_config,
    default_no_cache_headers,
)


class NoCacheMiddleware(BaseHTTPMiddleware):
    """Middleware that disables caching.

    Args:
        app: The ASGI application.
        config: No-cache configuration. ``None`` header collections fall
            back to the defaults.
    """

    def __init__(self, app: ASGIApp, *, config: NoCacheConfig | None = None) -> None:
        super().__init__(app)
        config = config or default_no_cache_config()
        self.no_cache_headers = (
            default_no_cache_headers()
            if config.no_cache_headers is None
            else config.no_cache_headers
        )
        self.etag_headers = (
            default_etag_headers() if config.etag_headers is None else config.etag_headers
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Strip conditional headers and mark the response uncacheable."""
        request_headers = MutableHeaders(scope=request.scope)
        for name in self.etag_headers:
            del request_headers[name]

        response = await call_next(request)

        for name, value in self.no_cache_headers.items():
            response.headers.setdefault(name, value)

        return response
