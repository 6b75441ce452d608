"""Real client IP middleware."""

from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from servekit.config.real_ip import (
    RealIPConfig,
    default_ip_extractor,
    default_real_ip_config,
)


class RealIPMiddleware:
    """Replace the ASGI client address with the extracted real IP.

    The peer port is kept so ``request.client`` stays a ``(host, port)``
    pair. Handlers further down see the real IP in ``request.client.host``.

    Args:
        app: The ASGI application.
        config: Real IP configuration. A missing extractor falls back to
            the default one.
    """

    def __init__(self, app: ASGIApp, *, config: RealIPConfig | None = None) -> None:
        self.app = app
        config = config or default_real_ip_config()
        self.ip_extractor = config.ip_extractor or default_ip_extractor

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Rewrite the client address of HTTP requests."""
        if scope["type"] == "http":
            real_ip = self.ip_extractor(Request(scope))
            client = scope.get("client")
            port = client[1] if client else None
            scope["client"] = (real_ip, port)

        await self.app(scope, receive, send)
