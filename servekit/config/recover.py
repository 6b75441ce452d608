"""Unhandled exception recovery configuration."""

from pydantic import Field

from servekit.config.options import Option, OptionsModel, replace_field

DEFAULT_STACK_SIZE = 4 << 10  # 4 KiB


class RecoverConfig(OptionsModel):
    """Recovery settings."""

    stack_size: int = Field(
        default=DEFAULT_STACK_SIZE,
        description="Maximum size of the logged stack trace in bytes",
    )
    enable_stack_trace: bool = Field(
        default=True,
        description="Whether stack traces are logged",
    )


type RecoverOption = Option[RecoverConfig]


def default_recover_config() -> RecoverConfig:
    """Return a fresh recover configuration with default values."""
    return RecoverConfig()


def with_recover_stack_size(size: int) -> RecoverOption:
    """Set the maximum stack trace size in bytes."""
    return replace_field("stack_size", size)


def with_recover_enable_stack_trace(enabled: bool) -> RecoverOption:
    """Enable or disable stack trace logging."""
    return replace_field("enable_stack_trace", enabled)


def recover_config_to_options(config: RecoverConfig) -> list[RecoverOption]:
    """Convert a recover configuration into the options that reproduce it."""
    return [
        with_recover_stack_size(config.stack_size),
        with_recover_enable_stack_trace(config.enable_stack_trace),
    ]
