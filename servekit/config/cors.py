"""Cross-origin resource sharing configuration."""

from pydantic import Field

from servekit.config.options import Option, OptionsModel, replace_field

DEFAULT_CORS_MAX_AGE = 86400  # 24 hours in seconds


class CORSConfig(OptionsModel):
    """CORS settings.

    An ``allowed_origins`` of ``["*"]`` allows every origin.
    """

    allowed_origins: list[str] | None = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to make cross-origin requests",
    )
    allowed_methods: list[str] | None = Field(
        default_factory=lambda: [
            "GET",
            "POST",
            "PUT",
            "PATCH",
            "DELETE",
            "HEAD",
            "OPTIONS",
        ],
        description="HTTP methods allowed for cross-origin requests",
    )
    allowed_headers: list[str] | None = Field(
        default_factory=lambda: [
            "Accept",
            "Authorization",
            "Content-Type",
            "X-CSRF-Token",
            "X-Request-Id",
        ],
        description="Request headers allowed for cross-origin requests",
    )
    exposed_headers: list[str] | None = Field(
        default_factory=list,
        description="Response headers exposed to the client",
    )
    allow_credentials: bool = Field(
        default=False,
        description="Whether credentials are allowed",
    )
    max_age: int = Field(
        default=DEFAULT_CORS_MAX_AGE,
        description="Seconds a preflight response may be cached",
    )
    options_passthrough: bool = Field(
        default=False,
        description="Whether preflight requests reach the next handler",
    )
    exempt_paths: list[str] | None = Field(
        default_factory=list,
        description="Paths that skip CORS processing",
    )


type CORSOption = Option[CORSConfig]


def default_cors_config() -> CORSConfig:
    """Return a fresh CORS configuration with default values."""
    return CORSConfig()


def with_cors_allowed_origins(origins: list[str] | None) -> CORSOption:
    """Set the allowed origins."""
    return replace_field("allowed_origins", origins)


def with_cors_allowed_methods(methods: list[str] | None) -> CORSOption:
    """Set the allowed HTTP methods."""
    return replace_field("allowed_methods", methods)


def with_cors_allowed_headers(headers: list[str] | None) -> CORSOption:
    """Set the allowed request headers."""
    return replace_field("allowed_headers", headers)


def with_cors_exposed_headers(headers: list[str] | None) -> CORSOption:
    """Set the response headers exposed to the client."""
    return replace_field("exposed_headers", headers)


def with_cors_allow_credentials(allow: bool) -> CORSOption:
    """Set whether credentials are allowed."""
    return replace_field("allow_credentials", allow)


def with_cors_max_age(max_age: int) -> CORSOption:
    """Set how long preflight responses may be cached, in seconds."""
    return replace_field("max_age", max_age)


def with_cors_options_passthrough(passthrough: bool) -> CORSOption:
    """Set whether preflight requests are passed to the next handler."""
    return replace_field("options_passthrough", passthrough)


def with_cors_exempt_paths(paths: list[str] | None) -> CORSOption:
    """Set the paths that skip CORS processing."""
    return replace_field("exempt_paths", paths)
