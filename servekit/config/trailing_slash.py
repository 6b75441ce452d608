"""Trailing slash normalization configuration."""

from enum import StrEnum

from pydantic import Field
from starlette import status

from servekit.config.options import Option, OptionsModel, replace_field


class TrailingSlashAction(StrEnum):
    """What to do with a path whose trailing slash does not match the preference."""

    REDIRECT = "redirect"
    """Redirect the client to the canonical URL."""

    STRIP = "strip"
    """Remove the trailing slash and keep processing."""

    APPEND = "append"
    """Add a trailing slash and keep processing."""


class TrailingSlashConfig(OptionsModel):
    """Trailing slash settings.

    Most APIs prefer paths without a trailing slash, hence the default.
    """

    action: TrailingSlashAction = Field(
        default=TrailingSlashAction.REDIRECT,
        description="Action taken on a mismatch",
    )
    prefer_trailing_slash: bool = Field(
        default=False,
        description="Whether canonical paths end with a slash",
    )
    redirect_code: int = Field(
        default=status.HTTP_301_MOVED_PERMANENTLY,
        description="Status code used for redirects",
    )


type TrailingSlashOption = Option[TrailingSlashConfig]


def default_trailing_slash_config() -> TrailingSlashConfig:
    """Return a fresh trailing slash configuration with default values."""
    return TrailingSlashConfig()


def with_trailing_slash_action(action: TrailingSlashAction) -> TrailingSlashOption:
    """Set the action taken on a mismatch."""
    return replace_field("action", action)


def with_trailing_slash_preference(prefer: bool) -> TrailingSlashOption:
    """Set whether canonical paths end with a slash."""
    return replace_field("prefer_trailing_slash", prefer)


def with_trailing_slash_redirect_code(code: int) -> TrailingSlashOption:
    """Set the status code used for redirects."""
    return replace_field("redirect_code", code)
