"""Shared fixtures for unit tests."""

import os
from collections.abc import Generator
from typing import cast

import pytest
from pytest_mock import MockerFixture, MockType

from servekit.core.settings import ServerSettings


@pytest.fixture(autouse=True)
def clean_env(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[pytest.MonkeyPatch]:
    """Backup and restore environment variables to prevent test interference.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    original_env = os.environ.copy()

    env_prefixes = [
        "APP_",
        "ENVIRONMENT",
        "DEBUG",
        "ADDR",
        "TLS_ADDR",
        "CERT_FILE",
        "KEY_FILE",
        "DISABLE_DEFAULT_MIDDLEWARES",
        "LOG_CONFIG__",
    ]
    for key in list(os.environ.keys()):
        if any(key.upper().startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> ServerSettings:
    """Provide a real settings object with test values.

    Returns:
        ServerSettings: Settings read from the patched environment.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("ADDR", "127.0.0.1:3000")

    return ServerSettings(_env_file=None)


@pytest.fixture
def mock_app(mocker: MockerFixture) -> MockType:
    """Provide a mock ASGI app for middleware construction.

    Returns:
        MockType: Mock app that is never called.
    """
    return cast("MockType", mocker.AsyncMock())
