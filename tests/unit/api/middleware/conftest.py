"""Fixtures for middleware unit tests."""

from typing import cast

import pytest
from pytest_mock import MockerFixture, MockType
from starlette.responses import Response


@pytest.fixture
def response() -> Response:
    """Provide a plain 200 response returned by the next handler."""
    return Response("ok", status_code=200, media_type="text/plain")


@pytest.fixture
def call_next(mocker: MockerFixture, response: Response) -> MockType:
    """Provide a next-handler mock returning ``response``."""
    return cast("MockType", mocker.AsyncMock(return_value=response))


@pytest.fixture
def mock_log(mocker: MockerFixture) -> MockType:
    """Provide a Loguru-like logger mock."""
    return cast("MockType", mocker.Mock())
