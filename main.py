"""Main entry point for running a servekit server."""

import uvicorn
from loguru import logger

from servekit.api.main import create_app
from servekit.core.logging import setup_logging
from servekit.core.settings import config_from_settings, get_settings, split_host_port


def main() -> None:
    """Run the application with uvicorn.

    The HTTPS address is used when both a certificate and a key file are
    configured, the HTTP address otherwise.
    """
    settings = get_settings()

    setup_logging(settings)

    config = config_from_settings(settings)
    tls = bool(config.cert_file and config.key_file)
    host, port = split_host_port(config.tls_addr if tls else config.addr)

    # Route uvicorn's own loggers through Loguru
    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {
            "default": {
                "class": "servekit.core.logging.InterceptHandler",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False,
            },
        },
    }

    scheme = "https" if tls else "http"
    logger.info(f"Starting Uvicorn on {scheme}://{host}:{port}")
    uvicorn.run(
        create_app(config, settings),
        host=host,
        port=port,
        log_config=log_config,
        ssl_certfile=config.cert_file if tls else None,
        ssl_keyfile=config.key_file if tls else None,
    )


if __name__ == "__main__":
    main()
