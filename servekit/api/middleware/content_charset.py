"""Request charset validation middleware."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servekit.api.middleware.error_handler import servekit_error_response
from servekit.config.content import (
    ContentCharsetConfig,
    default_content_charset_config,
)
from servekit.core.exceptions import UnsupportedMediaTypeError


def content_charset(content_type: str) -> str | None:
    """Return the lowercased ``charset`` parameter of a Content-Type value.

    Returns None when the value carries no charset parameter.
    """
    for part in content_type.lower().split(";"):
        part = part.strip()
        if part.startswith("charset"):
            return part.partition("=")[2].strip()
    return None


class ContentCharsetMiddleware(BaseHTTPMiddleware):
    """Reject requests whose Content-Type charset is not allowed with a 415.

    Charsets are compared case-insensitively. A request without a charset
    parameter is accepted only when the allowed list contains an empty
    string.

    Args:
        app: The ASGI application.
        config: Content charset configuration. ``None`` charsets fall back
            to the defaults.
    """

    def __init__(
        self, app: ASGIApp, *, config: ContentCharsetConfig | None = None
    ) -> None:
        super().__init__(app)
        config = config or default_content_charset_config()
        charsets = config.charsets
        if charsets is None:
            charsets = default_content_charset_config().charsets or []
        self.allowed = {charset.lower() for charset in charsets}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Validate the request charset before calling the application."""
        charset = content_charset(request.headers.get("content-type", ""))
        if (charset or "") not in self.allowed:
            return servekit_error_response(
                UnsupportedMediaTypeError(
                    charset or "", sorted(self.allowed), field="charset"
                )
            )

        return await call_next(request)
