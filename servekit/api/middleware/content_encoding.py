"""Request content encoding validation middleware."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servekit.api.middleware.content_type import has_body
from servekit.api.middleware.error_handler import servekit_error_response
from servekit.api.utils.paths import is_exempt
from servekit.config.content import (
    ContentEncodingConfig,
    default_content_encoding_config,
)
from servekit.core.exceptions import UnsupportedMediaTypeError


class ContentEncodingMiddleware(BaseHTTPMiddleware):
    """Reject request bodies with a disallowed Content-Encoding with a 415.

    Every comma-separated token of every ``Content-Encoding`` header must be
    in the allowed list. Requests without a body are always let through.

    Args:
        app: The ASGI application.
        config: Content encoding configuration. ``None`` encodings fall back
            to the defaults.
    """

    def __init__(
        self, app: ASGIApp, *, config: ContentEncodingConfig | None = None
    ) -> None:
        super().__init__(app)
        config = config or default_content_encoding_config()
        encodings = config.encodings
        if encodings is None:
            encodings = default_content_encoding_config().encodings or []
        self.allowed = {encoding.strip().lower() for encoding in encodings}
        self.exempt_paths = list(config.exempt_paths or ())

    def rejected_encoding(self, request: Request) -> str | None:
        """Return the first encoding token that is not allowed, if any."""
        for header in request.headers.getlist("content-encoding"):
            for token in header.split(","):
                encoding = token.strip().lower()
                if encoding and encoding not in self.allowed:
                    return encoding
        return None

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Validate the request encodings before calling the application."""
        if is_exempt(request.url.path, self.exempt_paths) or not has_body(request):
            return await call_next(request)

        if (encoding := self.rejected_encoding(request)) is not None:
            return servekit_error_response(
                UnsupportedMediaTypeError(
                    encoding, sorted(self.allowed), field="content_encoding"
                )
            )

        return await call_next(request)
