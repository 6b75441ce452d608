"""Real client IP extraction configuration.

Proxies and load balancers hide the client address behind their own, so the
real IP has to be recovered from forwarding headers. The extractors here
read those headers in a fixed priority order and fall back to the transport
peer address taken from the ASGI ``client`` tuple.
"""

from pydantic import Field
from starlette.requests import Request

from servekit.config.options import Option, OptionsModel, replace_field
from servekit.core.types import IPExtractor


def remote_addr(request: Request) -> str:
    """Return the peer address as ``host:port``.

    IPv6 hosts are bracketed. A missing port yields the bare host and a
    missing client yields an empty string.

    Args:
        request: The incoming request.

    Returns:
        str: The peer address including its port.
    """
    client = request.client
    if client is None:
        return ""
    host, port = client.host, client.port
    if port is None:
        return host
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def remote_host(request: Request) -> str:
    """Return the peer host without its port.

    Args:
        request: The incoming request.

    Returns:
        str: The peer host, or an empty string when the client is unknown.
    """
    client = request.client
    if client is None:
        return ""
    return client.host


def _first_forwarded_for(value: str) -> str:
    return value.split(",")[0].strip()


def default_ip_extractor(request: Request) -> str:
    """Extract the real client IP from forwarding headers.

    Checks, in order: ``X-Forwarded-For`` (first entry), ``X-Real-IP``,
    ``X-Forwarded``, the ``for=`` parameter of the RFC 7239 ``Forwarded``
    header, and finally the peer host.

    Args:
        request: The incoming request.

    Returns:
        str: The client IP address.

    Examples:
        A request carrying ``X-Forwarded-For: 203.0.113.1, 198.51.100.1``
        yields ``"203.0.113.1"``.
    """
    if xff := request.headers.get("x-forwarded-for"):
        return _first_forwarded_for(xff)

    if xri := request.headers.get("x-real-ip"):
        return xri

    if xf := request.headers.get("x-forwarded"):
        return xf

    if forwarded := request.headers.get("forwarded"):
        for part in forwarded.split(";"):
            part = part.strip()
            if part.startswith("for="):
                return part.removeprefix("for=").strip('"')

    return remote_host(request)


def remote_addr_ip_extractor(request: Request) -> str:
    """Use the peer host only, ignoring proxy headers."""
    return remote_host(request)


def x_forwarded_for_ip_extractor(request: Request) -> str:
    """Use the first ``X-Forwarded-For`` entry, else the peer host."""
    if xff := request.headers.get("x-forwarded-for"):
        return _first_forwarded_for(xff)
    return remote_host(request)


def x_real_ip_extractor(request: Request) -> str:
    """Use the ``X-Real-IP`` header (nginx style), else the peer host."""
    if xri := request.headers.get("x-real-ip"):
        return xri
    return remote_host(request)


class RealIPConfig(OptionsModel):
    """Real IP extraction settings."""

    ip_extractor: IPExtractor | None = Field(
        default=default_ip_extractor,
        description="Function extracting the real client IP",
    )


type RealIPOption = Option[RealIPConfig]


def default_real_ip_config() -> RealIPConfig:
    """Return a fresh real IP configuration with default values."""
    return RealIPConfig()


def with_real_ip_extractor(extractor: IPExtractor | None) -> RealIPOption:
    """Set the function used to extract the real client IP."""
    return replace_field("ip_extractor", extractor)
