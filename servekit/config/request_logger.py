"""Request logging configuration."""

from enum import StrEnum

from pydantic import Field

from servekit.config.options import Option, OptionsModel, replace_field


class LogField(StrEnum):
    """Fields that can be included in the request completion log entry."""

    METHOD = "method"
    URI = "uri"
    PATH = "path"
    HOST = "host"
    PROTOCOL = "protocol"
    REFERER = "referer"
    USER_AGENT = "user_agent"
    STATUS = "status"
    DURATION_NS = "duration_ns"
    DURATION_HUMAN = "duration_human"
    REMOTE_ADDR = "remote_addr"
    CLIENT_IP = "client_ip"
    REQUEST_ID = "request_id"


def default_log_fields() -> list[LogField]:
    """Return every log field in declaration order."""
    return list(LogField)


class RequestLoggerConfig(OptionsModel):
    """Request logger settings.

    With ``log_errors`` enabled, 4xx responses are logged as warnings and 5xx
    responses as errors. Otherwise everything is logged at info level.
    """

    log_errors: bool = Field(
        default=True,
        description="Raise log level for client and server errors",
    )
    fields: list[LogField] | None = Field(
        default_factory=default_log_fields,
        description="Fields included in each log entry",
    )
    exempt_paths: list[str] | None = Field(
        default_factory=list,
        description="Paths that are not logged",
    )


type RequestLoggerOption = Option[RequestLoggerConfig]


def default_request_logger_config() -> RequestLoggerConfig:
    """Return a fresh request logger configuration with default values."""
    return RequestLoggerConfig()


def with_request_logger_log_errors(enabled: bool) -> RequestLoggerOption:
    """Enable or disable status based log levels."""
    return replace_field("log_errors", enabled)


def with_request_logger_fields(fields: list[LogField] | None) -> RequestLoggerOption:
    """Set the fields included in each log entry."""
    return replace_field("fields", fields)


def with_request_logger_exempt_paths(
    paths: list[str] | None,
) -> RequestLoggerOption:
    """Set the paths that are not logged."""
    return replace_field("exempt_paths", paths)


def request_logger_config_to_options(
    config: RequestLoggerConfig,
) -> list[RequestLoggerOption]:
    """Convert a request logger configuration into the options that reproduce it."""
    return [
        with_request_logger_log_errors(config.log_errors),
        with_request_logger_fields(config.fields),
        with_request_logger_exempt_paths(config.exempt_paths),
    ]
