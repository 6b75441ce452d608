"""Request ID configuration and generation."""

import secrets
import time

from pydantic import Field

from servekit.config.options import Option, OptionsModel, replace_field
from servekit.core.constants import REQUEST_ID_CONTEXT_KEY, REQUEST_ID_HEADER
from servekit.core.types import IDGenerator

REQUEST_ID_BYTES = 16


def generate_request_id() -> str:
    """Generate a unique request ID.

    The ID is 16 bytes from the operating system's random source, hex
    encoded to 32 lowercase characters. If the random source fails, a
    timestamp based ID is returned instead so a request never goes without
    an identifier.

    Returns:
        str: The generated request ID.
    """
    try:
        return secrets.token_hex(REQUEST_ID_BYTES)
    except OSError:
        return f"request-{time.time_ns()}"


class RequestIDConfig(OptionsModel):
    """Request ID settings."""

    header: str = Field(
        default=REQUEST_ID_HEADER,
        description="Header carrying the request ID",
    )
    generator: IDGenerator | None = Field(
        default=generate_request_id,
        description="Function producing new request IDs",
    )
    context_key: str = Field(
        default=REQUEST_ID_CONTEXT_KEY,
        description="Key under which the ID is stored in the request state",
    )


type RequestIDOption = Option[RequestIDConfig]


def default_request_id_config() -> RequestIDConfig:
    """Return a fresh request ID configuration with default values."""
    return RequestIDConfig()


def with_request_id_header(header: str) -> RequestIDOption:
    """Set the header carrying the request ID."""
    return replace_field("header", header)


def with_request_id_generator(generator: IDGenerator | None) -> RequestIDOption:
    """Set the request ID generator."""
    return replace_field("generator", generator)


def with_request_id_context_key(key: str) -> RequestIDOption:
    """Set the request state key for the ID."""
    return replace_field("context_key", key)


def request_id_config_to_options(config: RequestIDConfig) -> list[RequestIDOption]:
    """Convert a request ID configuration into the options that reproduce it."""
    return [
        with_request_id_header(config.header),
        with_request_id_generator(config.generator),
        with_request_id_context_key(config.context_key),
    ]
