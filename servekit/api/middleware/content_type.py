"""Request content type validation middleware."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servekit.api.middleware.error_handler import servekit_error_response
from servekit.api.utils.paths import is_exempt
from servekit.config.content import (
    ContentTypeConfig,
    default_content_type_config,
)
from servekit.core.exceptions import UnsupportedMediaTypeError


def has_body(request: Request) -> bool:
    """Whether the request announces a non-empty body."""
    content_length = request.headers.get("content-length")
    if content_length is not None:
        return content_length.strip() != "0"
    return "transfer-encoding" in request.headers


def media_type(content_type: str) -> str:
    """Strip parameters from a Content-Type value and normalize its case."""
    return content_type.partition(";")[0].strip().lower()


class ContentTypeMiddleware(BaseHTTPMiddleware):
    """Reject request bodies whose media type is not allowed with a 415.

    Requests without a body are always let through.

    Args:
        app: The ASGI application.
        config: Content type configuration. ``None`` content types fall back
            to the defaults.
    """

    def __init__(
        self, app: ASGIApp, *, config: ContentTypeConfig | None = None
    ) -> None:
        super().__init__(app)
        config = config or default_content_type_config()
        content_types = config.content_types
        if content_types is None:
            content_types = default_content_type_config().content_types or []
        self.allowed = {media_type(content_type) for content_type in content_types}
        self.exempt_paths = list(config.exempt_paths or ())

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Validate the request content type before calling the application."""
        if is_exempt(request.url.path, self.exempt_paths) or not has_body(request):
            return await call_next(request)

        content_type = media_type(request.headers.get("content-type", ""))
        if content_type not in self.allowed:
            return servekit_error_response(
                UnsupportedMediaTypeError(content_type, sorted(self.allowed))
            )

        return await call_next(request)
