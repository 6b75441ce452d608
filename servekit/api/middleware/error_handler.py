"""Global exception handlers for the FastAPI application.

This module provides centralized exception handling, ensuring every error
response has the ``ErrorResponse`` shape. Middlewares that reject a request
run outside FastAPI's exception handling, so they build their responses with
:func:`servekit_error_response` directly.
"""

import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from servekit.api.constants import WWW_AUTHENTICATE_HEADER
from servekit.api.schemas.errors import ErrorResponse, ServiceInfo
from servekit.api.utils.responses import ORJSONResponse
from servekit.core.context import RequestContext
from servekit.core.exceptions import (
    ErrorCode,
    Severity,
    ServekitError,
    UnauthorizedError,
)
from servekit.core.settings import ServerSettings, get_settings


def get_service_info(settings: ServerSettings) -> ServiceInfo:
    """Create ServiceInfo from application settings.

    Args:
        settings: Application settings

    Returns:
        ServiceInfo: Instance with current service metadata
    """
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def servekit_error_response(exc: ServekitError) -> Response:
    """Build the response for a ServekitError.

    Args:
        exc: The error to convert.

    Returns:
        Response: ORJSONResponse with the error's status code and details.
    """
    settings = get_settings()

    debug_info = None
    if settings.environment == "development" and not exc.is_expected:
        debug_info = {
            "exception_type": type(exc).__name__,
            "fingerprint": exc.fingerprint,
        }
        if exc.cause:
            debug_info["cause"] = {
                "type": type(exc.cause).__name__,
                "message": str(exc.cause),
            }

    error_response = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        details=exc.context or None,
        request_id=RequestContext.get_request_id(),
        severity=exc.severity.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )

    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {WWW_AUTHENTICATE_HEADER: exc.challenge}

    return ORJSONResponse(
        status_code=exc.status_code,
        content=error_response,
        headers=headers,
    )


async def servekit_error_handler(request: Request, exc: Exception) -> Response:
    """Handle ServekitError exceptions raised by route handlers.

    Args:
        request: The request that caused the exception
        exc: The ServekitError exception to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not a ServekitError instance
    """
    if not isinstance(exc, ServekitError):
        raise TypeError(f"Expected ServekitError, got {type(exc).__name__}")

    log = logger.warning if exc.is_expected else logger.error
    log(
        "Handling {exception_type}: {message}",
        exception_type=type(exc).__name__,
        message=exc.message,
        method=request.method,
        path=request.url.path,
        error_code=exc.error_code,
        fingerprint=exc.fingerprint,
    )

    return servekit_error_response(exc)


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError exceptions.

    Converts validation errors to ErrorResponse with field-level details.

    Args:
        request: The request that caused the exception
        exc: The RequestValidationError exception to handle

    Returns:
        Response: ORJSONResponse with validation error details

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    # Group messages by field path, e.g. ['body', 'email'] -> 'email'
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field_path = error.get("loc", ())
        field_name = ".".join(str(loc) for loc in field_path[1:]) or "root"
        field_errors.setdefault(field_name, []).append(
            error.get("msg", "Invalid value")
        )

    logger.warning(
        "Request validation failed",
        method=request.method,
        path=request.url.path,
        validation_errors=field_errors,
    )

    error_response = ErrorResponse(
        error_code=ErrorCode.VALIDATION_ERROR.value,
        message="Request validation failed",
        details={"validation_errors": field_errors},
        request_id=RequestContext.get_request_id(),
        severity=Severity.LOW.value,
        service_info=get_service_info(get_settings()),
    )

    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response,
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException.

    Args:
        request: The request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    error_code = ErrorCode.INTERNAL_ERROR
    severity = Severity.MEDIUM
    if exc.status_code == status.HTTP_400_BAD_REQUEST:
        error_code, severity = ErrorCode.VALIDATION_ERROR, Severity.LOW
    elif exc.status_code == status.HTTP_401_UNAUTHORIZED:
        error_code, severity = ErrorCode.UNAUTHORIZED, Severity.LOW
    elif exc.status_code in {
        status.HTTP_404_NOT_FOUND,
        status.HTTP_405_METHOD_NOT_ALLOWED,
    }:
        error_code, severity = ErrorCode.NOT_FOUND, Severity.LOW
    elif exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        severity = Severity.HIGH

    logger.warning(
        "HTTP exception",
        status=exc.status_code,
        method=request.method,
        path=request.url.path,
        detail=exc.detail,
    )

    error_response = ErrorResponse(
        error_code=error_code.value,
        message=str(exc.detail),
        request_id=RequestContext.get_request_id(),
        severity=severity.value,
        service_info=get_service_info(get_settings()),
    )

    return ORJSONResponse(
        status_code=exc.status_code,
        content=error_response,
        headers=exc.headers,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle exceptions nothing else caught.

    In production, internal error details are hidden from clients.

    Args:
        request: The request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: ORJSONResponse with generic error message
    """
    settings = get_settings()

    logger.opt(exception=exc).error(
        "Unhandled exception: {exception_type}",
        exception_type=type(exc).__name__,
        method=request.method,
        path=request.url.path,
    )

    if settings.environment == "production":
        message = "An internal server error occurred"
        details = None
        debug_info = None
    else:
        message = f"Internal server error: {type(exc).__name__}"
        details = {"error": str(exc), "type": type(exc).__name__}
        debug_info = {
            "stack_trace": traceback.format_tb(exc.__traceback__),
            "exception_type": type(exc).__name__,
        }

    error_response = ErrorResponse(
        error_code=ErrorCode.INTERNAL_ERROR.value,
        message=message,
        details=details,
        request_id=RequestContext.get_request_id(),
        severity=Severity.CRITICAL.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )

    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ServekitError, servekit_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
