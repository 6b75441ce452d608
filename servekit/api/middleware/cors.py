"""CORS support built on Starlette's ``CORSMiddleware``."""

from starlette.datastructures import Headers
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from servekit.api.utils.paths import is_exempt
from servekit.config.cors import CORSConfig, default_cors_config


class ServekitCORSMiddleware(CORSMiddleware):
    """``CORSMiddleware`` with exempt paths and preflight passthrough.

    Args:
        app: The ASGI application.
        exempt_paths: Paths that receive no CORS handling.
        options_passthrough: Hand preflight requests to the application
            instead of answering them here. CORS headers are still added
            to the application's response.
        **kwargs: Arguments for ``CORSMiddleware``.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        exempt_paths: list[str] | None = None,
        options_passthrough: bool = False,
        **kwargs: object,
    ) -> None:
        super().__init__(app, **kwargs)  # type: ignore[arg-type]
        self.exempt_paths = list(exempt_paths or ())
        self.options_passthrough = options_passthrough

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Apply CORS handling unless the path is exempt."""
        if scope["type"] == "http" and is_exempt(scope["path"], self.exempt_paths):
            await self.app(scope, receive, send)
            return

        if self.options_passthrough and scope["type"] == "http":
            headers = Headers(scope=scope)
            if (
                scope["method"] == "OPTIONS"
                and "origin" in headers
                and "access-control-request-method" in headers
            ):
                await self.simple_response(scope, receive, send, request_headers=headers)
                return

        await super().__call__(scope, receive, send)


def cors_middleware(config: CORSConfig | None = None) -> Middleware:
    """Build the CORS middleware entry for a configuration.

    Args:
        config: CORS configuration, defaults to ``default_cors_config()``.

    Returns:
        Middleware: Entry for FastAPI's ``middleware`` list or ``add_middleware``.
    """
    config = config or default_cors_config()
    return Middleware(
        ServekitCORSMiddleware,
        allow_origins=config.allowed_origins or (),
        allow_methods=config.allowed_methods or (),
        allow_headers=config.allowed_headers or (),
        expose_headers=config.exposed_headers or (),
        allow_credentials=config.allow_credentials,
        max_age=config.max_age,
        exempt_paths=config.exempt_paths,
        options_passthrough=config.options_passthrough,
    )
