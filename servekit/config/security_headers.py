"""Security response header configuration.

Defaults follow a locked-down API profile:

- **Content-Security-Policy**: deny everything except same-origin resources
- **Cross-Origin-***: isolate the document from other origins
- **Permissions-Policy**: disable every powerful browser feature
- **Strict-Transport-Security**: off until ``max_age`` is set
"""

from pydantic import Field

from servekit.config.options import Option, OptionsModel, apply_options, replace_field

DEFAULT_CONTENT_SECURITY_POLICY = (
    "default-src 'none'; "
    "script-src 'self'; "
    "connect-src 'self'; "
    "img-src 'self'; "
    "style-src 'self'; "
    "frame-ancestors 'self'; "
    "form-action 'self';"
)

PERMISSIONS_POLICY_FEATURES = (
    "accelerometer",
    "autoplay",
    "camera",
    "cross-origin-isolated",
    "display-capture",
    "encrypted-media",
    "fullscreen",
    "geolocation",
    "gyroscope",
    "keyboard-map",
    "magnetometer",
    "microphone",
    "midi",
    "payment",
    "picture-in-picture",
    "publickey-credentials-get",
    "screen-wake-lock",
    "sync-xhr",
    "usb",
    "web-share",
    "xr-spatial-tracking",
)

DEFAULT_PERMISSIONS_POLICY = ", ".join(
    f"{feature}=()" for feature in PERMISSIONS_POLICY_FEATURES
)


class StrictTransportSecurity(OptionsModel):
    """HSTS header settings. A zero ``max_age`` disables the header."""

    max_age: int = Field(default=0, description="max-age directive in seconds")
    exclude_subdomains: bool = Field(
        default=False,
        description="Omit the includeSubDomains directive",
    )
    preload: bool = Field(default=False, description="Add the preload directive")

    def header_value(self) -> str:
        """Render the Strict-Transport-Security header value."""
        value = f"max-age={self.max_age}"
        if not self.exclude_subdomains:
            value += "; includeSubDomains"
        if self.preload:
            value += "; preload"
        return value


type HSTSOption = Option[StrictTransportSecurity]


def default_hsts() -> StrictTransportSecurity:
    """Return a fresh HSTS configuration with default values."""
    return StrictTransportSecurity()


def with_hsts_max_age(max_age: int) -> HSTSOption:
    """Set the HSTS max-age in seconds."""
    return replace_field("max_age", max_age)


def with_hsts_exclude_subdomains(exclude: bool) -> HSTSOption:
    """Set whether includeSubDomains is omitted."""
    return replace_field("exclude_subdomains", exclude)


def with_hsts_preload(preload: bool) -> HSTSOption:
    """Set whether the preload directive is added."""
    return replace_field("preload", preload)


class SecurityHeadersConfig(OptionsModel):
    """Security header settings.

    Empty string values are replaced with their defaults by the middleware,
    except ``server`` whose default is empty.
    """

    content_security_policy: str = Field(
        default=DEFAULT_CONTENT_SECURITY_POLICY,
        description="Content-Security-Policy header value",
    )
    content_security_policy_report_only: bool = Field(
        default=False,
        description="Send the policy as Content-Security-Policy-Report-Only",
    )
    cross_origin_embedder_policy: str = Field(
        default="require-corp",
        description="Cross-Origin-Embedder-Policy header value",
    )
    cross_origin_opener_policy: str = Field(
        default="same-origin",
        description="Cross-Origin-Opener-Policy header value",
    )
    cross_origin_resource_policy: str = Field(
        default="same-origin",
        description="Cross-Origin-Resource-Policy header value",
    )
    permissions_policy: str = Field(
        default=DEFAULT_PERMISSIONS_POLICY,
        description="Permissions-Policy header value",
    )
    referrer_policy: str = Field(
        default="no-referrer",
        description="Referrer-Policy header value",
    )
    server: str = Field(default="", description="Server header value")
    strict_transport_security: StrictTransportSecurity = Field(
        default_factory=default_hsts,
        description="Strict-Transport-Security settings",
    )
    x_content_type_options: str = Field(
        default="nosniff",
        description="X-Content-Type-Options header value",
    )
    x_frame_options: str = Field(
        default="DENY",
        description="X-Frame-Options header value",
    )
    exempt_paths: list[str] | None = Field(
        default_factory=list,
        description="Paths that receive no security headers",
    )


type SecurityHeadersOption = Option[SecurityHeadersConfig]


def default_security_headers_config() -> SecurityHeadersConfig:
    """Return a fresh security headers configuration with default values."""
    return SecurityHeadersConfig()


def with_security_headers_csp(policy: str) -> SecurityHeadersOption:
    """Set the Content-Security-Policy value."""
    return replace_field("content_security_policy", policy)


def with_security_headers_csp_report_only(report_only: bool) -> SecurityHeadersOption:
    """Set whether the policy is sent in report-only mode."""
    return replace_field("content_security_policy_report_only", report_only)


def with_security_headers_cross_origin_embedder_policy(
    policy: str,
) -> SecurityHeadersOption:
    """Set the Cross-Origin-Embedder-Policy value."""
    return replace_field("cross_origin_embedder_policy", policy)


def with_security_headers_cross_origin_opener_policy(
    policy: str,
) -> SecurityHeadersOption:
    """Set the Cross-Origin-Opener-Policy value."""
    return replace_field("cross_origin_opener_policy", policy)


def with_security_headers_cross_origin_resource_policy(
    policy: str,
) -> SecurityHeadersOption:
    """Set the Cross-Origin-Resource-Policy value."""
    return replace_field("cross_origin_resource_policy", policy)


def with_security_headers_permissions_policy(policy: str) -> SecurityHeadersOption:
    """Set the Permissions-Policy value."""
    return replace_field("permissions_policy", policy)


def with_security_headers_referrer_policy(policy: str) -> SecurityHeadersOption:
    """Set the Referrer-Policy value."""
    return replace_field("referrer_policy", policy)


def with_security_headers_server(server: str) -> SecurityHeadersOption:
    """Set the Server header value."""
    return replace_field("server", server)


def with_security_headers_hsts(*options: HSTSOption) -> SecurityHeadersOption:
    """Set HSTS from options applied on top of the default HSTS settings.

    The current HSTS value of the config is discarded, so successive calls do
    not accumulate.

    Args:
        *options: HSTS options applied in order.

    Returns:
        SecurityHeadersOption: Option replacing the HSTS settings.
    """
    return replace_field(
        "strict_transport_security", apply_options(default_hsts(), options)
    )


def with_security_headers_x_content_type_options(
    value: str,
) -> SecurityHeadersOption:
    """Set the X-Content-Type-Options value."""
    return replace_field("x_content_type_options", value)


def with_security_headers_x_frame_options(value: str) -> SecurityHeadersOption:
    """Set the X-Frame-Options value."""
    return replace_field("x_frame_options", value)


def with_security_headers_exempt_paths(
    paths: list[str] | None,
) -> SecurityHeadersOption:
    """Set the paths that receive no security headers."""
    return replace_field("exempt_paths", paths)


def security_headers_config_to_options(
    config: SecurityHeadersConfig,
) -> list[SecurityHeadersOption]:
    """Convert a security headers configuration into reproducing options."""
    hsts = config.strict_transport_security
    return [
        with_security_headers_csp(config.content_security_policy),
        with_security_headers_csp_report_only(
            config.content_security_policy_report_only
        ),
        with_security_headers_cross_origin_embedder_policy(
            config.cross_origin_embedder_policy
        ),
        with_security_headers_cross_origin_opener_policy(
            config.cross_origin_opener_policy
        ),
        with_security_headers_cross_origin_resource_policy(
            config.cross_origin_resource_policy
        ),
        with_security_headers_permissions_policy(config.permissions_policy),
        with_security_headers_referrer_policy(config.referrer_policy),
        with_security_headers_server(config.server),
        with_security_headers_hsts(
            with_hsts_max_age(hsts.max_age),
            with_hsts_exclude_subdomains(hsts.exclude_subdomains),
            with_hsts_preload(hsts.preload),
        ),
        with_security_headers_x_content_type_options(config.x_content_type_options),
        with_security_headers_x_frame_options(config.x_frame_options),
        with_security_headers_exempt_paths(config.exempt_paths),
    ]
