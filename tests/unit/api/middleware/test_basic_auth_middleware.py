"""Unit tests for BasicAuthMiddleware."""

import base64

import orjson
import pytest
from pytest_mock import MockType
from starlette.responses import Response

from servekit.api.middleware.basic_auth import BasicAuthMiddleware, parse_basic_auth
from servekit.config.basic_auth import (
    default_basic_auth_config,
    with_basic_auth_credentials,
    with_basic_auth_exempt_paths,
    with_basic_auth_realm,
    with_basic_auth_validator,
)
from tests.fixtures.request_factory import RequestFactory


def basic(username: str, password: str) -> dict[str, str]:
    """Build an Authorization header for the credentials."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.mark.unit
class TestParseBasicAuth:
    """Test Authorization header decoding."""

    def test_valid(self) -> None:
        """Test a well-formed header."""
        assert parse_basic_auth(basic("alice", "s3:cret")["Authorization"]) == (
            "alice",
            "s3:cret",
        )

    @pytest.mark.parametrize(
        "header",
        [
            "",
            "Bearer token",
            "Basic not-base64!",
            f"Basic {base64.b64encode(b'no-colon').decode()}",
        ],
    )
    def test_invalid(self, header: str) -> None:
        """Test malformed headers are rejected."""
        assert parse_basic_auth(header) is None


@pytest.mark.unit
class TestBasicAuthMiddleware:
    """Test request authentication."""

    @pytest.fixture
    def middleware(self, mock_app: MockType) -> BasicAuthMiddleware:
        """Create a middleware with one user and an exempt health path."""
        config = default_basic_auth_config().apply(
            with_basic_auth_realm("admin"),
            with_basic_auth_credentials({"alice": "secret"}),
            with_basic_auth_exempt_paths(["/health"]),
        )
        return BasicAuthMiddleware(mock_app, config=config)

    async def test_valid_credentials(
        self,
        middleware: BasicAuthMiddleware,
        make_request: RequestFactory,
        call_next: MockType,
        response: Response,
    ) -> None:
        """Test matching credentials reach the handler."""
        request = make_request(headers=basic("alice", "secret"))

        assert await middleware.dispatch(request, call_next) is response

    @pytest.mark.parametrize(
        "headers",
        [{}, basic("alice", "wrong"), basic("bob", "secret")],
    )
    async def test_rejected_with_challenge(
        self,
        middleware: BasicAuthMiddleware,
        make_request: RequestFactory,
        call_next: MockType,
        headers: dict[str, str],
    ) -> None:
        """Test missing or wrong credentials get a 401 challenge."""
        result = await middleware.dispatch(make_request(headers=headers), call_next)

        assert result.status_code == 401
        assert result.headers["WWW-Authenticate"] == 'Basic realm="admin"'
        assert orjson.loads(result.body)["error_code"] == "UNAUTHORIZED"
        call_next.assert_not_called()

    async def test_exempt_path(
        self,
        middleware: BasicAuthMiddleware,
        make_request: RequestFactory,
        call_next: MockType,
        response: Response,
    ) -> None:
        """Test exempt paths skip authentication."""
        assert await middleware.dispatch(make_request(path="/health"), call_next) is (
            response
        )

    async def test_validator_takes_precedence(
        self,
        mock_app: MockType,
        make_request: RequestFactory,
        call_next: MockType,
        response: Response,
    ) -> None:
        """Test the validator decides even when credentials are configured."""
        config = default_basic_auth_config().apply(
            with_basic_auth_credentials({"alice": "secret"}),
            with_basic_auth_validator(lambda user, _password: user == "bob"),
        )
        middleware = BasicAuthMiddleware(mock_app, config=config)

        accepted = await middleware.dispatch(
            make_request(headers=basic("bob", "anything")), call_next
        )
        rejected = await middleware.dispatch(
            make_request(headers=basic("alice", "secret")), call_next
        )

        assert accepted is response
        assert rejected.status_code == 401

    async def test_rejects_everything_without_credentials(
        self,
        mock_app: MockType,
        make_request: RequestFactory,
        call_next: MockType,
    ) -> None:
        """Test the default configuration denies every request."""
        middleware = BasicAuthMiddleware(mock_app)

        result = await middleware.dispatch(
            make_request(headers=basic("alice", "secret")), call_next
        )

        assert result.status_code == 401
        assert result.headers["WWW-Authenticate"] == 'Basic realm="Restricted"'
