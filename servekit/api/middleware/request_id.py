"""Request ID middleware for request correlation.

This module implements middleware that gives every request an identifier:

- **Propagation**: An incoming ID header is reused as-is
- **Generation**: Otherwise a new ID is produced by the configured generator
- **Visibility**: The ID is written back onto the request headers, stored in
  ``request.state``, a context variable and the Loguru context, and echoed
  on the response

Downstream middlewares (recover, request logger) read the ID from the
request header, so this middleware sits first in the default chain.
"""

from loguru import logger
from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servekit.config.request_id import (
    RequestIDConfig,
    default_request_id_config,
    generate_request_id,
)
from servekit.core.constants import REQUEST_ID_CONTEXT_KEY, REQUEST_ID_HEADER
from servekit.core.context import RequestContext


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns and propagates request IDs.

    Empty settings fall back to the defaults: the ``X-Request-Id`` header,
    the ``request_id`` state key and the built-in generator.

    Args:
        app: The ASGI application.
        config: Request ID configuration.
    """

    def __init__(self, app: ASGIApp, *, config: RequestIDConfig | None = None) -> None:
        super().__init__(app)
        config = config or default_request_id_config()
        self.header = config.header or REQUEST_ID_HEADER
        self.generator = config.generator or generate_request_id
        self.context_key = config.context_key or REQUEST_ID_CONTEXT_KEY

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request with a request ID.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: Response with the request ID header.
        """
        request_id = request.headers.get(self.header) or self.generator()

        MutableHeaders(scope=request.scope)[self.header] = request_id
        setattr(request.state, self.context_key, request_id)
        RequestContext.set_request_id(request_id)

        with logger.contextualize(request_id=request_id):
            response = await call_next(request)

        response.headers[self.header] = request_id
        return response
