"""Root conftest.py for the servekit test suite.

This file contains project-wide fixtures and pytest configuration.
"""

from collections.abc import Generator

import pytest
from loguru import logger

from servekit.core.context import RequestContext
from servekit.core.logging import _state
from servekit.core.settings import get_settings
from tests.fixtures.request_factory import RequestFactory, build_request


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_context() -> Generator[None]:
    """Clear the request context before and after each test."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None]:
    """Keep Loguru from writing to stdout during tests.

    Logging stays marked as configured so app creation does not add sinks.
    """
    logger.remove()
    _state.configured = True
    yield
    logger.remove()
    _state.configured = True


@pytest.fixture
def make_request() -> RequestFactory:
    """Build real Starlette requests from a minimal HTTP scope.

    Returns:
        RequestFactory: The request builder.
    """

    return build_request
