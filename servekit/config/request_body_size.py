"""Request body size limit configuration."""

from pydantic import Field

from servekit.config.options import Option, OptionsModel, replace_field

DEFAULT_MAX_BYTES = 1 << 20  # 1 MiB


class RequestBodySizeConfig(OptionsModel):
    """Request body size settings."""

    max_bytes: int = Field(
        default=DEFAULT_MAX_BYTES,
        description="Maximum request body size in bytes",
    )
    exempt_paths: list[str] | None = Field(
        default_factory=list,
        description="Paths that skip the size limit",
    )


type RequestBodySizeOption = Option[RequestBodySizeConfig]


def default_request_body_size_config() -> RequestBodySizeConfig:
    """Return a fresh request body size configuration with default values."""
    return RequestBodySizeConfig()


def with_request_body_size_max_bytes(size: int) -> RequestBodySizeOption:
    """Set the maximum request body size in bytes."""
    return replace_field("max_bytes", size)


def with_request_body_size_exempt_paths(
    paths: list[str] | None,
) -> RequestBodySizeOption:
    """Set the paths that skip the size limit."""
    return replace_field("exempt_paths", paths)


def request_body_size_config_to_options(
    config: RequestBodySizeConfig,
) -> list[RequestBodySizeOption]:
    """Convert a request body size configuration into reproducing options."""
    return [
        with_request_body_size_max_bytes(config.max_bytes),
        with_request_body_size_exempt_paths(config.exempt_paths),
    ]
