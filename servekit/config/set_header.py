"""Static response header configuration."""

from pydantic import Field

from servekit.config.options import Option, OptionsModel, replace_field


class SetHeaderConfig(OptionsModel):
    """Headers added to every response."""

    headers: dict[str, str] | None = Field(
        default_factory=dict,
        description="Header name to value mapping",
    )


type SetHeaderOption = Option[SetHeaderConfig]


def default_set_header_config() -> SetHeaderConfig:
    """Return a fresh set-header configuration with default values."""
    return SetHeaderConfig()


def with_set_headers(headers: dict[str, str] | None) -> SetHeaderOption:
    """Set the headers added to responses."""
    return replace_field("headers", headers)
