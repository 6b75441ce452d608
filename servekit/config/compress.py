"""Response compression configuration.

Carries settings only; encoding responses is left to the consumer.
"""

from enum import StrEnum

from pydantic import Field

from servekit.config.options import Option, OptionsModel, replace_field


class CompressionAlgorithm(StrEnum):
    """Supported compression algorithms."""

    GZIP = "gzip"
    DEFLATE = "deflate"


DEFAULT_COMPRESS_TYPES = (
    "text/html",
    "text/css",
    "text/plain",
    "text/javascript",
    "application/javascript",
    "application/json",
    "application/xml",
    "text/xml",
    "application/rss+xml",
    "application/atom+xml",
    "image/svg+xml",
)


class CompressConfig(OptionsModel):
    """Compression settings."""

    level: int = Field(default=6, description="Compression level (1-9)")
    types: list[str] | None = Field(
        default_factory=lambda: list(DEFAULT_COMPRESS_TYPES),
        description="MIME types to compress",
    )
    algorithms: list[CompressionAlgorithm] | None = Field(
        default_factory=lambda: [
            CompressionAlgorithm.GZIP,
            CompressionAlgorithm.DEFLATE,
        ],
        description="Compression algorithms to offer",
    )
    exempt_paths: list[str] | None = Field(
        default_factory=list,
        description="Paths that skip compression",
    )


type CompressOption = Option[CompressConfig]


def default_compress_config() -> CompressConfig:
    """Return a fresh compression configuration with default values."""
    return CompressConfig()


def with_compress_level(level: int) -> CompressOption:
    """Set the compression level."""
    return replace_field("level", level)


def with_compress_types(types: list[str] | None) -> CompressOption:
    """Set the MIME types to compress."""
    return replace_field("types", types)


def with_compress_algorithms(
    algorithms: list[CompressionAlgorithm] | None,
) -> CompressOption:
    """Set the compression algorithms to offer."""
    return replace_field("algorithms", algorithms)


def with_compress_exempt_paths(paths: list[str] | None) -> CompressOption:
    """Set the paths that skip compression."""
    return replace_field("exempt_paths", paths)
