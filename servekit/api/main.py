"""FastAPI application factory.

This module builds a FastAPI application from a server configuration:

- Logging setup from the settings
- Exception handler registration
- Middleware chain resolution and registration
- Health and info endpoints

Middleware are executed in reverse order of registration, so the resolved
chain (outermost first) is registered back to front.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI
from loguru import logger
from starlette.middleware import Middleware

from servekit.api.middleware.error_handler import register_exception_handlers
from servekit.api.middleware.recover import RecoverMiddleware
from servekit.api.middleware.request_body_size import RequestBodySizeMiddleware
from servekit.api.middleware.request_id import RequestIDMiddleware
from servekit.api.middleware.request_logger import RequestLoggerMiddleware
from servekit.api.middleware.security_headers import SecurityHeadersMiddleware
from servekit.api.utils.responses import ORJSONResponse
from servekit.config.server import Config
from servekit.core.logging import setup_logging
from servekit.core.settings import ServerSettings, config_from_settings, get_settings


def builtin_middlewares(config: Config) -> list[Middleware]:
    """Return the built-in middleware chain for a built configuration.

    Order, outermost first: request ID, recover, request body size,
    security headers, request logger.

    Args:
        config: Built server configuration.

    Returns:
        list[Middleware]: The built-in middleware entries.
    """
    log = config.logger or logger
    return [
        Middleware(RequestIDMiddleware, config=config.request_id),
        Middleware(RecoverMiddleware, config=config.recover, log=log),
        Middleware(RequestBodySizeMiddleware, config=config.request_body_size),
        Middleware(SecurityHeadersMiddleware, config=config.security_headers),
        Middleware(RequestLoggerMiddleware, config=config.request_logger, log=log),
    ]


def resolve_middlewares(config: Config) -> list[Middleware]:
    """Resolve the middleware chain of a configuration, outermost first.

    - With ``disable_default_middlewares``, only ``default_middlewares``
      (possibly none) are used
    - With ``default_middlewares`` unset, only the built-ins are used
    - Otherwise the built-ins come first, followed by the custom ones

    Args:
        config: Built server configuration.

    Returns:
        list[Middleware]: The middleware entries to install.
    """
    if config.disable_default_middlewares:
        return list(config.default_middlewares or [])
    if config.default_middlewares is None:
        return builtin_middlewares(config)
    return builtin_middlewares(config) + list(config.default_middlewares)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Log application startup and shutdown.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.
    """
    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown complete")


def create_app(
    config: Config | None = None, settings: ServerSettings | None = None
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Server configuration. Built from the settings if not provided.
        settings: Optional settings instance. If not provided, will use
            get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    config = (config or config_from_settings(settings)).build()

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    application.state.config = config

    register_exception_handlers(application)

    for middleware in reversed(resolve_middlewares(config)):
        application.add_middleware(
            middleware.cls, *middleware.args, **middleware.kwargs
        )

    @application.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint for monitoring and load balancers.

        Returns:
            dict[str, str]: The service status.
        """
        return {"status": "healthy"}

    @application.get("/info")
    async def info(
        app_settings: Annotated[ServerSettings, Depends(get_settings)],
    ) -> dict[str, Any]:
        """Get application information.

        Args:
            app_settings: Application settings injected via dependency.

        Returns:
            dict[str, Any]: Application name, version and environment.
        """
        return {
            "app_name": app_settings.app_name,
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "debug": app_settings.debug,
        }

    return application


app = create_app()
