"""Trailing slash normalization middleware."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from servekit.config.trailing_slash import (
    TrailingSlashAction,
    TrailingSlashConfig,
    default_trailing_slash_config,
)


def canonical_path(path: str, *, prefer_trailing_slash: bool) -> str:
    """Return the path with its trailing slash matching the preference.

    The root path is always canonical.
    """
    if path == "/":
        return path
    if prefer_trailing_slash:
        return path if path.endswith("/") else f"{path}/"
    return path.removesuffix("/")


class TrailingSlashMiddleware(BaseHTTPMiddleware):
    """Normalize trailing slashes on request paths.

    Depending on the action, a mismatching path is redirected to its
    canonical form or rewritten in place before routing. Strip only removes
    a trailing slash and append only adds a missing one, so a path that
    disagrees with the preference the other way passes through unchanged.

    Args:
        app: The ASGI application.
        config: Trailing slash configuration.
    """

    def __init__(
        self, app: ASGIApp, *, config: TrailingSlashConfig | None = None
    ) -> None:
        super().__init__(app)
        self.config = config or default_trailing_slash_config()
        self.redirect_code = (
            self.config.redirect_code or default_trailing_slash_config().redirect_code
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Redirect or rewrite the request path when needed."""
        path = request.url.path
        new_path = canonical_path(
            path, prefer_trailing_slash=self.config.prefer_trailing_slash
        )
        if new_path == path:
            return await call_next(request)

        if self.config.action == TrailingSlashAction.REDIRECT:
            return RedirectResponse(
                url=str(request.url.replace(path=new_path)),
                status_code=self.redirect_code,
            )

        has_trailing_slash = path.endswith("/")
        rewrite = (
            self.config.action == TrailingSlashAction.STRIP and has_trailing_slash
        ) or (
            self.config.action == TrailingSlashAction.APPEND and not has_trailing_slash
        )
        if rewrite:
            request.scope["path"] = new_path
            request.scope["raw_path"] = new_path.encode()
        return await call_next(request)
