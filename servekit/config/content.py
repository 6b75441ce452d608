"""Request content negotiation configuration.

Three independent allow-lists checked against incoming requests:
- **Content type**: media types accepted for request bodies
- **Charset**: ``charset`` parameters accepted on the ``Content-Type``
  header; an empty string admits requests that specify none
- **Encoding**: ``Content-Encoding`` values accepted for request bodies
"""

from pydantic import Field

from servekit.config.options import Option, OptionsModel, replace_field


class ContentTypeConfig(OptionsModel):
    """Allowed request content types."""

    content_types: list[str] | None = Field(
        default_factory=lambda: [
            "application/json",
            "application/x-www-form-urlencoded",
            "multipart/form-data",
        ],
        description="Media types accepted for request bodies",
    )
    exempt_paths: list[str] | None = Field(
        default_factory=list,
        description="Paths that skip content type validation",
    )


class ContentCharsetConfig(OptionsModel):
    """Allowed request charsets."""

    charsets: list[str] | None = Field(
        default_factory=lambda: ["utf-8", ""],
        description="Accepted charsets; an empty string allows no charset",
    )


class ContentEncodingConfig(OptionsModel):
    """Allowed request content encodings."""

    encodings: list[str] | None = Field(
        default_factory=lambda: ["gzip", "deflate"],
        description="Content encodings accepted for request bodies",
    )
    exempt_paths: list[str] | None = Field(
        default_factory=list,
        description="Paths that skip content encoding validation",
    )


type ContentTypeOption = Option[ContentTypeConfig]
type ContentCharsetOption = Option[ContentCharsetConfig]
type ContentEncodingOption = Option[ContentEncodingConfig]


def default_content_type_config() -> ContentTypeConfig:
    """Return a fresh content type configuration with default values."""
    return ContentTypeConfig()


def default_content_charset_config() -> ContentCharsetConfig:
    """Return a fresh content charset configuration with default values."""
    return ContentCharsetConfig()


def default_content_encoding_config() -> ContentEncodingConfig:
    """Return a fresh content encoding configuration with default values."""
    return ContentEncodingConfig()


def with_content_type_content_types(
    content_types: list[str] | None,
) -> ContentTypeOption:
    """Set the accepted request media types."""
    return replace_field("content_types", content_types)


def with_content_type_exempt_paths(paths: list[str] | None) -> ContentTypeOption:
    """Set the paths that skip content type validation."""
    return replace_field("exempt_paths", paths)


def with_content_charset_charsets(charsets: list[str] | None) -> ContentCharsetOption:
    """Set the accepted charsets."""
    return replace_field("charsets", charsets)


def with_content_encoding_encodings(
    encodings: list[str] | None,
) -> ContentEncodingOption:
    """Set the accepted content encodings."""
    return replace_field("encodings", encodings)


def with_content_encoding_exempt_paths(
    paths: list[str] | None,
) -> ContentEncodingOption:
    """Set the paths that skip content encoding validation."""
    return replace_field("exempt_paths", paths)
