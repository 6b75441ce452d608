"""HTTP basic authentication middleware."""

import base64
import binascii
import secrets

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servekit.api.middleware.error_handler import servekit_error_response
from servekit.api.utils.paths import is_exempt
from servekit.config.basic_auth import BasicAuthConfig, default_basic_auth_config
from servekit.core.exceptions import UnauthorizedError


def parse_basic_auth(authorization: str) -> tuple[str, str] | None:
    """Decode a ``Basic`` Authorization header value.

    Args:
        authorization: The raw header value.

    Returns:
        tuple[str, str] | None: Username and password, or None when the
            header is not valid basic authentication.
    """
    scheme, _, encoded = authorization.partition(" ")
    if scheme.lower() != "basic":
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode()
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """Require HTTP basic authentication.

    A configured validator takes precedence over the credentials mapping.
    With neither, every request is rejected. Failures are answered with a
    401 carrying a ``WWW-Authenticate`` challenge for the realm.

    Args:
        app: The ASGI application.
        config: Basic auth configuration.
    """

    def __init__(self, app: ASGIApp, *, config: BasicAuthConfig | None = None) -> None:
        super().__init__(app)
        self.config = config or default_basic_auth_config()
        self.realm = self.config.realm or default_basic_auth_config().realm
        self.exempt_paths = list(self.config.exempt_paths or ())

    def is_valid(self, username: str, password: str) -> bool:
        """Check a username and password against the configuration."""
        if self.config.validator is not None:
            return self.config.validator(username, password)
        if self.config.credentials is not None:
            expected = self.config.credentials.get(username)
            return expected is not None and secrets.compare_digest(
                password.encode(), expected.encode()
            )
        return False

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Authenticate the request before calling the application."""
        if is_exempt(request.url.path, self.exempt_paths):
            return await call_next(request)

        credentials = parse_basic_auth(request.headers.get("authorization", ""))
        if credentials is None or not self.is_valid(*credentials):
            return servekit_error_response(UnauthorizedError(realm=self.realm))

        return await call_next(request)
