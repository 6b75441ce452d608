"""Recovery middleware for unhandled exceptions.

Exceptions escaping the application are logged with the request ID and an
optional, size-limited stack trace, then answered with a 500 so the server
keeps serving.
"""

import time
import traceback
from typing import Any

from loguru import logger
from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servekit.api.constants import UPGRADE_CONNECTION
from servekit.api.schemas.errors import ErrorResponse
from servekit.api.utils.responses import ORJSONResponse
from servekit.config.recover import (
    DEFAULT_STACK_SIZE,
    RecoverConfig,
    default_recover_config,
)
from servekit.core.constants import REQUEST_ID_HEADER
from servekit.core.exceptions import ErrorCode, Severity


def truncate_stack(stack: str, size: int) -> str:
    """Cut a stack trace down to at most ``size`` bytes of UTF-8."""
    return stack.encode()[:size].decode(errors="ignore")


class RecoverMiddleware(BaseHTTPMiddleware):
    """Middleware that turns unhandled exceptions into 500 responses.

    Args:
        app: The ASGI application.
        config: Recover configuration. A non-positive stack size falls back
            to the default.
        log: Logger to report to, defaults to the Loguru logger.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        config: RecoverConfig | None = None,
        log: Any = None,
    ) -> None:
        super().__init__(app)
        self.config = config or default_recover_config()
        self.stack_size = self.config.stack_size
        if self.stack_size <= 0:
            self.stack_size = DEFAULT_STACK_SIZE
        self.log = log or logger

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Call the application and recover from its exceptions.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: The application's response, or a 500 after an exception.
        """
        try:
            return await call_next(request)
        except Exception as exc:
            request_id = (
                request.headers.get(REQUEST_ID_HEADER) or f"recover-{time.time_ns()}"
            )

            fields: dict[str, Any] = {
                "error": repr(exc),
                "request_id": request_id,
            }
            if self.config.enable_stack_trace:
                fields["stack"] = truncate_stack(
                    "".join(traceback.format_exception(exc)), self.stack_size
                )

            self.log.bind(**fields).error("Recovered from unhandled exception")

            # Upgraded connections are owned by the handler, keep the status
            if request.headers.get("connection", "").lower() == UPGRADE_CONNECTION:
                return Response()

            return ORJSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=ErrorResponse(
                    error_code=ErrorCode.INTERNAL_ERROR.value,
                    message="Internal Server Error",
                    request_id=request_id,
                    severity=Severity.CRITICAL.value,
                ),
            )
