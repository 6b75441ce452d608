"""No-cache response configuration.

The defaults cover every cache layer a response may pass through: browsers
(``Cache-Control``, ``Expires``), HTTP/1.0 caches (``Pragma``) and nginx
(``X-Accel-Expires``). Conditional request headers are stripped so upstream
handlers cannot answer with ``304 Not Modified``.
"""

from email.utils import formatdate

from pydantic import Field

from servekit.config.options import Option, OptionsModel, replace_field

# HTTP date of the Unix epoch: "Thu, 01 Jan 1970 00:00:00 GMT"
EPOCH = formatdate(0, usegmt=True)


def default_no_cache_headers() -> dict[str, str]:
    """Return a fresh copy of the default no-cache response headers."""
    return {
        "Expires": EPOCH,
        "Cache-Control": (
            "no-cache, no-store, no-transform, must-revalidate, private, max-age=0"
        ),
        "Pragma": "no-cache",
        "X-Accel-Expires": "0",
    }


def default_etag_headers() -> list[str]:
    """Return a fresh copy of the default conditional request headers."""
    return [
        "ETag",
        "If-Modified-Since",
        "If-Match",
        "If-None-Match",
        "If-Range",
        "If-Unmodified-Since",
    ]


class NoCacheConfig(OptionsModel):
    """No-cache settings."""

    no_cache_headers: dict[str, str] | None = Field(
        default_factory=default_no_cache_headers,
        description="Headers set on every response",
    )
    etag_headers: list[str] | None = Field(
        default_factory=default_etag_headers,
        description="Request headers removed before the handler runs",
    )


type NoCacheOption = Option[NoCacheConfig]


def default_no_cache_config() -> NoCacheConfig:
    """Return a fresh no-cache configuration with default values."""
    return NoCacheConfig()


def with_no_cache_headers(headers: dict[str, str] | None) -> NoCacheOption:
    """Set the headers applied to responses."""
    return replace_field("no_cache_headers", headers)


def with_no_cache_etag_headers(headers: list[str] | None) -> NoCacheOption:
    """Set the conditional request headers to remove."""
    return replace_field("etag_headers", headers)
