"""HTTP basic authentication configuration."""

from pydantic import Field

from servekit.config.options import Option, OptionsModel, replace_field
from servekit.core.types import CredentialValidator


class BasicAuthConfig(OptionsModel):
    """Basic authentication settings.

    When ``validator`` is set it takes precedence over ``credentials``.
    """

    realm: str = Field(default="Restricted", description="Authentication realm")
    credentials: dict[str, str] | None = Field(
        default=None,
        description="Username to password mapping",
    )
    validator: CredentialValidator | None = Field(
        default=None,
        description="Custom (username, password) validator",
    )
    exempt_paths: list[str] | None = Field(
        default_factory=list,
        description="Paths that skip authentication (e.g. /health, /login)",
    )


type BasicAuthOption = Option[BasicAuthConfig]


def default_basic_auth_config() -> BasicAuthConfig:
    """Return a fresh basic auth configuration with default values."""
    return BasicAuthConfig()


def with_basic_auth_realm(realm: str) -> BasicAuthOption:
    """Set the authentication realm."""
    return replace_field("realm", realm)


def with_basic_auth_credentials(
    credentials: dict[str, str] | None,
) -> BasicAuthOption:
    """Set the username to password mapping."""
    return replace_field("credentials", credentials)


def with_basic_auth_validator(
    validator: CredentialValidator | None,
) -> BasicAuthOption:
    """Set a custom credential validator."""
    return replace_field("validator", validator)


def with_basic_auth_exempt_paths(paths: list[str] | None) -> BasicAuthOption:
    """Set the paths that skip authentication."""
    return replace_field("exempt_paths", paths)
