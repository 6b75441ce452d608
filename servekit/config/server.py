"""Top-level server configuration.

The server configuration aggregates the settings of the middlewares that
make up the default chain. For each of them it keeps two things:

- **Option list**: the options the user supplied (or the options that
  reproduce the module defaults)
- **Resolved config**: the result of applying that option list to a fresh
  default, filled in by :meth:`Config.build`

Typical use:

    >>> config = new_config(
    ...     with_addr("0.0.0.0:8080"),
    ...     with_recover_options(with_recover_stack_size(8192)),
    ... )
    >>> config.recover.stack_size
    8192
"""

from typing import Any, Self

from pydantic import Field
from starlette.middleware import Middleware

from servekit.config.options import Option, OptionsModel, apply_options, replace_field
from servekit.config.recover import (
    RecoverConfig,
    RecoverOption,
    default_recover_config,
    recover_config_to_options,
)
from servekit.config.request_body_size import (
    RequestBodySizeConfig,
    RequestBodySizeOption,
    default_request_body_size_config,
    request_body_size_config_to_options,
)
from servekit.config.request_id import (
    RequestIDConfig,
    RequestIDOption,
    default_request_id_config,
    request_id_config_to_options,
)
from servekit.config.request_logger import (
    RequestLoggerConfig,
    RequestLoggerOption,
    default_request_logger_config,
    request_logger_config_to_options,
)
from servekit.config.security_headers import (
    SecurityHeadersConfig,
    SecurityHeadersOption,
    default_security_headers_config,
    security_headers_config_to_options,
)
from servekit.core.constants import DEFAULT_ADDR, DEFAULT_TLS_ADDR


class Config(OptionsModel):
    """Server configuration."""

    addr: str = Field(default=DEFAULT_ADDR, description="HTTP listen address")
    tls_addr: str = Field(default=DEFAULT_TLS_ADDR, description="HTTPS listen address")

    disable_default_middlewares: bool = Field(
        default=False,
        description="Use only default_middlewares instead of the built-in chain",
    )
    default_middlewares: list[Middleware] | None = Field(
        default=None,
        description="Custom middlewares added after (or instead of) the built-ins",
    )

    recover_options: list[RecoverOption] = Field(
        default_factory=lambda: recover_config_to_options(default_recover_config()),
        description="Options for the recover middleware",
    )
    request_body_size_options: list[RequestBodySizeOption] = Field(
        default_factory=lambda: request_body_size_config_to_options(
            default_request_body_size_config()
        ),
        description="Options for the request body size middleware",
    )
    request_id_options: list[RequestIDOption] = Field(
        default_factory=lambda: request_id_config_to_options(
            default_request_id_config()
        ),
        description="Options for the request ID middleware",
    )
    request_logger_options: list[RequestLoggerOption] = Field(
        default_factory=lambda: request_logger_config_to_options(
            default_request_logger_config()
        ),
        description="Options for the request logger middleware",
    )
    security_headers_options: list[SecurityHeadersOption] = Field(
        default_factory=lambda: security_headers_config_to_options(
            default_security_headers_config()
        ),
        description="Options for the security headers middleware",
    )

    recover: RecoverConfig = Field(default_factory=default_recover_config)
    request_body_size: RequestBodySizeConfig = Field(
        default_factory=default_request_body_size_config
    )
    request_id: RequestIDConfig = Field(default_factory=default_request_id_config)
    request_logger: RequestLoggerConfig = Field(
        default_factory=default_request_logger_config
    )
    security_headers: SecurityHeadersConfig = Field(
        default_factory=default_security_headers_config
    )

    # None selects the global loguru logger
    logger: Any = Field(default=None, description="Logger used by the server")

    cert_file: str = Field(default="", description="TLS certificate file path")
    key_file: str = Field(default="", description="TLS private key file path")

    def build(self) -> Self:
        """Resolve the middleware configurations from their option lists.

        Each resolved config is a fresh module default with that module's
        options applied in order. Running ``build`` twice gives the same
        result.

        Returns:
            Self: A copy of this configuration with resolved sub-configs.
        """
        return self.model_copy(
            update={
                "recover": apply_options(
                    default_recover_config(), self.recover_options
                ),
                "request_body_size": apply_options(
                    default_request_body_size_config(),
                    self.request_body_size_options,
                ),
                "request_id": apply_options(
                    default_request_id_config(), self.request_id_options
                ),
                "request_logger": apply_options(
                    default_request_logger_config(), self.request_logger_options
                ),
                "security_headers": apply_options(
                    default_security_headers_config(),
                    self.security_headers_options,
                ),
            }
        )


type ServerOption = Option[Config]


def default_config() -> Config:
    """Return a fresh, unbuilt server configuration with default values."""
    return Config()


def new_config(*options: ServerOption) -> Config:
    """Create a built server configuration.

    Args:
        *options: Server options applied to the defaults, first to last.

    Returns:
        Config: The configuration with every sub-config resolved.
    """
    return default_config().apply(*options).build()


def with_addr(addr: str) -> ServerOption:
    """Set the HTTP listen address."""
    return replace_field("addr", addr)


def with_tls_addr(addr: str) -> ServerOption:
    """Set the HTTPS listen address."""
    return replace_field("tls_addr", addr)


def with_disable_default_middlewares(disabled: bool) -> ServerOption:
    """Set whether the built-in middleware chain is skipped."""
    return replace_field("disable_default_middlewares", disabled)


def with_default_middlewares(middlewares: list[Middleware] | None) -> ServerOption:
    """Set the custom middleware list."""
    return replace_field("default_middlewares", middlewares)


def with_recover_options(*options: RecoverOption) -> ServerOption:
    """Replace the recover middleware options."""
    return replace_field("recover_options", list(options))


def with_request_body_size_options(*options: RequestBodySizeOption) -> ServerOption:
    """Replace the request body size middleware options."""
    return replace_field("request_body_size_options", list(options))


def with_request_id_options(*options: RequestIDOption) -> ServerOption:
    """Replace the request ID middleware options."""
    return replace_field("request_id_options", list(options))


def with_request_logger_options(*options: RequestLoggerOption) -> ServerOption:
    """Replace the request logger middleware options."""
    return replace_field("request_logger_options", list(options))


def with_security_headers_options(*options: SecurityHeadersOption) -> ServerOption:
    """Replace the security headers middleware options."""
    return replace_field("security_headers_options", list(options))


def with_logger(logger: Any) -> ServerOption:
    """Set the logger used by the server."""
    return replace_field("logger", logger)


def with_cert_file(path: str) -> ServerOption:
    """Set the TLS certificate file path."""
    return replace_field("cert_file", path)


def with_key_file(path: str) -> ServerOption:
    """Set the TLS private key file path."""
    return replace_field("key_file", path)
