"""Security headers middleware for adding common security headers to responses."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from servekit.api.constants import (
    CSP_HEADER,
    CSP_REPORT_ONLY_HEADER,
    FORWARDED_PROTO_HEADERS,
    HSTS_HEADER,
)
from servekit.api.utils.paths import is_exempt
from servekit.config.security_headers import (
    SecurityHeadersConfig,
    default_security_headers_config,
)


def is_https(request: Request) -> bool:
    """Whether the request reached the server (or its proxy) over HTTPS."""
    return request.url.scheme == "https" or any(
        request.headers.get(header) == "https" for header in FORWARDED_PROTO_HEADERS
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses.

    Empty header values in the configuration are replaced with the defaults,
    except ``Server`` which is only sent when set. HSTS is only sent on
    HTTPS requests and only when its ``max_age`` is non-zero. Headers set by
    the application take precedence.

    Args:
        app: The ASGI application to wrap.
        config: Security headers configuration.
    """

    def __init__(
        self, app: ASGIApp, *, config: SecurityHeadersConfig | None = None
    ) -> None:
        super().__init__(app)
        config = config or default_security_headers_config()
        defaults = default_security_headers_config()

        csp_header = (
            CSP_REPORT_ONLY_HEADER
            if config.content_security_policy_report_only
            else CSP_HEADER
        )
        self.headers = {
            csp_header: config.content_security_policy
            or defaults.content_security_policy,
            "Cross-Origin-Embedder-Policy": config.cross_origin_embedder_policy
            or defaults.cross_origin_embedder_policy,
            "Cross-Origin-Opener-Policy": config.cross_origin_opener_policy
            or defaults.cross_origin_opener_policy,
            "Cross-Origin-Resource-Policy": config.cross_origin_resource_policy
            or defaults.cross_origin_resource_policy,
            "Permissions-Policy": config.permissions_policy
            or defaults.permissions_policy,
            "Referrer-Policy": config.referrer_policy or defaults.referrer_policy,
            "X-Content-Type-Options": config.x_content_type_options
            or defaults.x_content_type_options,
            "X-Frame-Options": config.x_frame_options or defaults.x_frame_options,
        }
        if config.server:
            self.headers["Server"] = config.server

        self.hsts = config.strict_transport_security
        self.exempt_paths = list(config.exempt_paths or ())

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Add security headers to the response.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or route handler.

        Returns:
            Response: The HTTP response with security headers added.
        """
        response = await call_next(request)

        if is_exempt(request.url.path, self.exempt_paths):
            return response

        for name, value in self.headers.items():
            response.headers.setdefault(name, value)

        if self.hsts.max_age != 0 and is_https(request):
            response.headers.setdefault(HSTS_HEADER, self.hsts.header_value())

        return response
