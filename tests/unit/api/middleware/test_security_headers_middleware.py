"""Unit tests for SecurityHeadersMiddleware."""

import pytest
from pytest_mock import MockType
from starlette.responses import Response

from servekit.api.middleware.security_headers import (
    SecurityHeadersMiddleware,
    is_https,
)
from servekit.config.security_headers import (
    DEFAULT_CONTENT_SECURITY_POLICY,
    DEFAULT_PERMISSIONS_POLICY,
    default_security_headers_config,
    with_hsts_max_age,
    with_security_headers_csp,
    with_security_headers_csp_report_only,
    with_security_headers_exempt_paths,
    with_security_headers_hsts,
    with_security_headers_referrer_policy,
    with_security_headers_server,
)
from tests.fixtures.request_factory import RequestFactory

HSTS_ENABLED = default_security_headers_config().apply(
    with_security_headers_hsts(with_hsts_max_age(31536000))
)


@pytest.mark.unit
class TestSecurityHeadersMiddleware:
    """Test suite for SecurityHeadersMiddleware."""

    async def test_adds_default_headers(
        self,
        mock_app: MockType,
        make_request: RequestFactory,
        call_next: MockType,
    ) -> None:
        """Test the default header set."""
        # Arrange
        middleware = SecurityHeadersMiddleware(mock_app)

        # Act
        result = await middleware.dispatch(make_request(), call_next)

        # Assert
        assert result.headers["Content-Security-Policy"] == (
            DEFAULT_CONTENT_SECURITY_POLICY
        )
        assert result.headers["Cross-Origin-Embedder-Policy"] == "require-corp"
        assert result.headers["Cross-Origin-Opener-Policy"] == "same-origin"
        assert result.headers["Cross-Origin-Resource-Policy"] == "same-origin"
        assert result.headers["Permissions-Policy"] == DEFAULT_PERMISSIONS_POLICY
        assert result.headers["Referrer-Policy"] == "no-referrer"
        assert result.headers["X-Content-Type-Options"] == "nosniff"
        assert result.headers["X-Frame-Options"] == "DENY"
        assert "Server" not in result.headers
        assert "Strict-Transport-Security" not in result.headers

    async def test_handler_headers_take_precedence(
        self,
        mock_app: MockType,
        make_request: RequestFactory,
        call_next: MockType,
        response: Response,
    ) -> None:
        """Test headers already on the response are not overwritten."""
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        middleware = SecurityHeadersMiddleware(mock_app)

        result = await middleware.dispatch(make_request(), call_next)

        assert result.headers["X-Frame-Options"] == "SAMEORIGIN"

    async def test_empty_values_use_defaults(
        self,
        mock_app: MockType,
        make_request: RequestFactory,
        call_next: MockType,
    ) -> None:
        """Test empty configured values are replaced by the defaults."""
        config = default_security_headers_config().apply(
            with_security_headers_csp(""),
            with_security_headers_referrer_policy(""),
        )
        middleware = SecurityHeadersMiddleware(mock_app, config=config)

        result = await middleware.dispatch(make_request(), call_next)

        assert result.headers["Content-Security-Policy"] == (
            DEFAULT_CONTENT_SECURITY_POLICY
        )
        assert result.headers["Referrer-Policy"] == "no-referrer"

    async def test_server_and_report_only(
        self,
        mock_app: MockType,
        make_request: RequestFactory,
        call_next: MockType,
    ) -> None:
        """Test the Server header and report-only CSP."""
        config = default_security_headers_config().apply(
            with_security_headers_server("servekit"),
            with_security_headers_csp_report_only(True),
        )
        middleware = SecurityHeadersMiddleware(mock_app, config=config)

        result = await middleware.dispatch(make_request(), call_next)

        assert result.headers["Server"] == "servekit"
        assert "Content-Security-Policy-Report-Only" in result.headers
        assert "Content-Security-Policy" not in result.headers

    @pytest.mark.parametrize(
        ("scheme", "headers", "expected"),
        [
            ("https", {}, True),
            ("http", {"X-Forwarded-Proto": "https"}, True),
            ("http", {"X-Forwarded-Protocol": "https"}, True),
            ("http", {}, False),
            ("http", {"X-Forwarded-Proto": "http"}, False),
        ],
    )
    async def test_hsts_only_over_https(
        self,
        mock_app: MockType,
        make_request: RequestFactory,
        call_next: MockType,
        scheme: str,
        headers: dict[str, str],
        expected: bool,
    ) -> None:
        """Test HSTS is sent only for HTTPS requests."""
        middleware = SecurityHeadersMiddleware(mock_app, config=HSTS_ENABLED)
        request = make_request(scheme=scheme, headers=headers)

        result = await middleware.dispatch(request, call_next)

        assert is_https(request) is expected
        assert ("Strict-Transport-Security" in result.headers) is expected
        if expected:
            assert result.headers["Strict-Transport-Security"] == (
                "max-age=31536000; includeSubDomains"
            )

    async def test_exempt_path(
        self,
        mock_app: MockType,
        make_request: RequestFactory,
        call_next: MockType,
    ) -> None:
        """Test exempt paths receive no security headers."""
        config = default_security_headers_config().apply(
            with_security_headers_exempt_paths(["/docs"])
        )
        middleware = SecurityHeadersMiddleware(mock_app, config=config)

        result = await middleware.dispatch(make_request(path="/docs"), call_next)

        assert "X-Frame-Options" not in result.headers

    async def test_exempt_prefix(
        self,
        mock_app: MockType,
        make_request: RequestFactory,
        call_next: MockType,
    ) -> None:
        """Test an entry ending in a slash exempts the paths below it."""
        config = default_security_headers_config().apply(
            with_security_headers_exempt_paths(["/docs/"])
        )
        middleware = SecurityHeadersMiddleware(mock_app, config=config)

        exempt = await middleware.dispatch(make_request(path="/docs/api"), call_next)
        assert "X-Frame-Options" not in exempt.headers

        covered = await middleware.dispatch(make_request(path="/docsx"), call_next)
        assert covered.headers["X-Frame-Options"] == "DENY"
