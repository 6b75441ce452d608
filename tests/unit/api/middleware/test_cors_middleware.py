"""Unit tests for the CORS middleware."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from servekit.api.middleware.cors import ServekitCORSMiddleware, cors_middleware
from servekit.config.cors import (
    CORSConfig,
    default_cors_config,
    with_cors_allow_credentials,
    with_cors_allowed_origins,
    with_cors_exempt_paths,
    with_cors_max_age,
    with_cors_options_passthrough,
)

PREFLIGHT_HEADERS = {
    "Origin": "https://app.example.com",
    "Access-Control-Request-Method": "POST",
}


def build_client(config: CORSConfig) -> TestClient:
    """Build a test client for an app with the CORS middleware."""
    app = FastAPI(middleware=[cors_middleware(config)])

    @app.get("/items")
    async def list_items() -> dict[str, str]:
        return {"status": "ok"}

    @app.options("/items")
    async def items_options() -> dict[str, bool]:
        return {"handled": True}

    @app.get("/internal")
    async def internal() -> dict[str, str]:
        return {"status": "ok"}

    return TestClient(app)


@pytest.mark.unit
class TestCORSMiddleware:
    """Test CORS handling."""

    def test_entry_uses_servekit_class(self) -> None:
        """Test the middleware entry carries the configuration."""
        entry = cors_middleware(default_cors_config().apply(with_cors_max_age(60)))

        assert entry.cls is ServekitCORSMiddleware
        assert entry.kwargs["max_age"] == 60
        assert entry.kwargs["allow_origins"] == ["*"]

    def test_simple_request_gets_allow_origin(self) -> None:
        """Test a cross-origin GET is answered with the allow header."""
        client = build_client(default_cors_config())

        response = client.get("/items", headers={"Origin": "https://app.example.com"})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_preflight_is_answered_by_middleware(self) -> None:
        """Test preflight requests never reach the handler by default."""
        client = build_client(default_cors_config())

        response = client.options("/items", headers=PREFLIGHT_HEADERS)

        assert response.status_code == 200
        assert response.text == "OK"
        assert response.headers["access-control-max-age"] == "86400"
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_options_passthrough(self) -> None:
        """Test preflight requests reach the handler when passthrough is on."""
        client = build_client(
            default_cors_config().apply(with_cors_options_passthrough(True))
        )

        response = client.options("/items", headers=PREFLIGHT_HEADERS)

        assert response.json() == {"handled": True}
        assert response.headers["access-control-allow-origin"] == "*"

    def test_disallowed_origin(self) -> None:
        """Test an origin outside the allow-list gets no allow header."""
        client = build_client(
            default_cors_config().apply(
                with_cors_allowed_origins(["https://app.example.com"]),
                with_cors_allow_credentials(True),
            )
        )

        allowed = client.get("/items", headers={"Origin": "https://app.example.com"})
        denied = client.get("/items", headers={"Origin": "https://evil.example"})

        assert allowed.headers["access-control-allow-origin"] == (
            "https://app.example.com"
        )
        assert allowed.headers["access-control-allow-credentials"] == "true"
        assert "access-control-allow-origin" not in denied.headers

    def test_exempt_path(self) -> None:
        """Test exempt paths get no CORS handling."""
        client = build_client(
            default_cors_config().apply(with_cors_exempt_paths(["/internal"]))
        )

        response = client.get("/internal", headers={"Origin": "https://a.example"})

        assert "access-control-allow-origin" not in response.headers
