"""Environment-driven settings for running a servekit server.

Settings are read with Pydantic Settings from environment variables and an
optional ``.env`` file, then turned into the option-based server
configuration by :func:`config_from_settings`.

Features:
- **Type safety**: All settings are validated and typed
- **Environment variables**: Supports .env files and environment overrides
- **Nested configuration**: Uses __ delimiter (e.g. ``LOG_CONFIG__LOG_LEVEL``)
- **Caching**: Settings are read once per process through ``get_settings``
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from servekit.config.request_logger import with_request_logger_exempt_paths
from servekit.config.server import (
    Config,
    default_config,
    with_addr,
    with_cert_file,
    with_disable_default_middlewares,
    with_key_file,
    with_request_logger_options,
    with_tls_addr,
)
from servekit.core.constants import DEFAULT_ADDR, DEFAULT_TLS_ADDR
from servekit.core.exceptions import ConfigurationError


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Derived from the environment if unset.",
    )
    excluded_paths: list[str] = Field(
        default_factory=list,
        description="Paths to exclude from request logging",
    )


class ServerSettings(BaseSettings):
    """Main settings class for a servekit server."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
    )

    # Application settings
    app_name: str = Field(default="servekit", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=True, description="Debug mode flag")

    # Server settings
    addr: str = Field(default=DEFAULT_ADDR, description="HTTP listen address")
    tls_addr: str = Field(default=DEFAULT_TLS_ADDR, description="HTTPS listen address")
    cert_file: str = Field(default="", description="TLS certificate file path")
    key_file: str = Field(default="", description="TLS private key file path")
    disable_default_middlewares: bool = Field(
        default=False,
        description="Skip the built-in middleware chain",
    )

    # Logging configuration
    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = (
                "console" if self.environment == "development" else "json"
            )


@lru_cache
def get_settings() -> ServerSettings:
    """Get cached settings instance."""
    return ServerSettings()


def split_host_port(addr: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    IPv6 hosts may be bracketed (``[::1]:8080``); the brackets are removed.
    An empty host means all interfaces and is returned as ``0.0.0.0``.

    Args:
        addr: The address to split.

    Returns:
        tuple[str, int]: The host and the port number.

    Raises:
        ConfigurationError: If the address has no port or the port is not
            a number.
    """
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ConfigurationError(
            f"Address {addr!r} is missing a port", context={"addr": addr}
        )
    try:
        port_number = int(port)
    except ValueError as e:
        raise ConfigurationError(
            f"Address {addr!r} has an invalid port", context={"addr": addr}, cause=e
        ) from e
    host = host.removeprefix("[").removesuffix("]")
    return host or "0.0.0.0", port_number  # noqa: S104 - empty host binds all interfaces


def config_from_settings(settings: ServerSettings) -> Config:
    """Build the server configuration described by the settings.

    The listen addresses and certificate paths are passed through. Paths
    excluded from logging become the request logger's exempt paths.

    Args:
        settings: Settings to convert.

    Returns:
        Config: The built server configuration.
    """
    return (
        default_config()
        .apply(
            with_addr(settings.addr),
            with_tls_addr(settings.tls_addr),
            with_cert_file(settings.cert_file),
            with_key_file(settings.key_file),
            with_disable_default_middlewares(settings.disable_default_middlewares),
            with_request_logger_options(
                with_request_logger_exempt_paths(
                    list(settings.log_config.excluded_paths)
                )
            ),
        )
        .build()
    )
