"""Shared fixtures for integration tests."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from servekit.api.main import create_app
from servekit.config.server import ServerOption, new_config
from servekit.core.settings import ServerSettings
from tests.fixtures.app_factory import AppFactory, add_test_routes


@pytest.fixture
def settings() -> ServerSettings:
    """Provide settings independent of the environment and .env files."""
    return ServerSettings(_env_file=None)


@pytest.fixture
def app_factory(settings: ServerSettings) -> AppFactory:
    """Build applications from server options.

    Returns:
        AppFactory: Callable taking server options and returning the app.
    """

    def _create(*options: ServerOption) -> FastAPI:
        app = create_app(new_config(*options), settings)
        add_test_routes(app)
        return app

    return _create


@pytest.fixture
async def client(app_factory: AppFactory) -> AsyncGenerator[AsyncClient]:
    """Provide an async client for an app with the default chain."""
    transport = ASGITransport(app=app_factory())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
