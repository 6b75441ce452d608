"""Request body size limit middleware."""

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from servekit.api.middleware.error_handler import servekit_error_response
from servekit.api.utils.paths import is_exempt
from servekit.config.request_body_size import (
    DEFAULT_MAX_BYTES,
    RequestBodySizeConfig,
    default_request_body_size_config,
)
from servekit.core.exceptions import PayloadTooLargeError


class RequestBodySizeMiddleware:
    """Reject requests whose body exceeds ``max_bytes`` with a 413.

    A declared ``Content-Length`` above the limit is rejected before the
    application runs. Bodies without one (chunked uploads) are counted as
    they are read, and the application is cut off with a 413 as soon as the
    limit is crossed. A non-positive limit falls back to the default and
    exempt paths are never checked.

    Args:
        app: The ASGI application.
        config: Request body size configuration.
    """

    def __init__(
        self, app: ASGIApp, *, config: RequestBodySizeConfig | None = None
    ) -> None:
        self.app = app
        self.config = config or default_request_body_size_config()
        self.max_bytes = self.config.max_bytes
        if self.max_bytes <= 0:
            self.max_bytes = DEFAULT_MAX_BYTES
        self.exempt_paths = list(self.config.exempt_paths or ())

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Limit the body of HTTP requests."""
        if scope["type"] != "http" or is_exempt(scope["path"], self.exempt_paths):
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length", "")
        if content_length.isdigit() and int(content_length) > self.max_bytes:
            response = servekit_error_response(
                PayloadTooLargeError(self.max_bytes, int(content_length))
            )
            await response(scope, receive, send)
            return

        received = 0
        exceeded = False
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    exceeded = True
                    raise PayloadTooLargeError(self.max_bytes, received)
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            # the 413 replaces whatever the application answers after the cut
            if exceeded and not response_started:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except Exception:
            # errors caused by the cut off body become the 413
            if not exceeded or response_started:
                raise

        if exceeded and not response_started:
            response = servekit_error_response(
                PayloadTooLargeError(self.max_bytes, received)
            )
            await response(scope, receive, send)
