"""Static response header middleware."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servekit.config.set_header import SetHeaderConfig, default_set_header_config


class SetHeaderMiddleware(BaseHTTPMiddleware):
    """Add the configured headers to every response.

    Headers already set by the application are left untouched.

    Args:
        app: The ASGI application.
        config: Set-header configuration.
    """

    def __init__(self, app: ASGIApp, *, config: SetHeaderConfig | None = None) -> None:
        super().__init__(app)
        config = config or default_set_header_config()
        self.headers = config.headers or {}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response
