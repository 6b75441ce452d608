"""Unit tests for RequestBodySizeMiddleware."""

from typing import Any

import orjson
import pytest
from pytest_mock import MockerFixture, MockType
from starlette.types import Message, Receive, Scope, Send

from servekit.api.middleware.request_body_size import RequestBodySizeMiddleware
from servekit.config.request_body_size import (
    DEFAULT_MAX_BYTES,
    default_request_body_size_config,
    with_request_body_size_exempt_paths,
    with_request_body_size_max_bytes,
)

LIMITED = default_request_body_size_config().apply(
    with_request_body_size_max_bytes(10),
    with_request_body_size_exempt_paths(["/upload", "/files/"]),
)


def http_scope(path: str = "/", headers: dict[str, str] | None = None) -> Scope:
    """Build a minimal POST scope."""
    return {
        "type": "http",
        "method": "POST",
        "path": path,
        "query_string": b"",
        "headers": [
            (name.lower().encode(), value.encode())
            for name, value in (headers or {}).items()
        ],
    }


def body_receiver(*chunks: bytes) -> Receive:
    """Deliver the chunks as ``http.request`` messages, the last one final."""
    messages = [
        {"type": "http.request", "body": chunk, "more_body": index < len(chunks) - 1}
        for index, chunk in enumerate(chunks)
    ]

    async def receive() -> Message:
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return receive


async def reading_app(scope: Scope, receive: Receive, send: Send) -> None:
    """Read the whole body and answer with its size."""
    size = 0
    while True:
        message = await receive()
        size += len(message.get("body", b""))
        if not message.get("more_body", False):
            break
    await send({"type": "http.response.start", "status": 200, "headers": []})
    await send({"type": "http.response.body", "body": str(size).encode()})


async def run(
    middleware: RequestBodySizeMiddleware, scope: Scope, receive: Receive
) -> list[Message]:
    """Run the middleware and collect the messages it sends."""
    sent: list[Message] = []

    async def send(message: Message) -> None:
        sent.append(message)

    await middleware(scope, receive, send)
    return sent


def status_of(sent: list[Message]) -> int:
    """Return the status of the response start message."""
    return int(sent[0]["status"])


def json_body(sent: list[Message]) -> Any:
    """Decode the JSON body of the collected response."""
    return orjson.loads(b"".join(m.get("body", b"") for m in sent[1:]))


@pytest.mark.unit
class TestRequestBodySizeMiddleware:
    """Test request body size limits."""

    async def test_rejects_declared_oversized_body(self, mock_app: MockType) -> None:
        """Test a Content-Length above the limit is answered before the app runs."""
        middleware = RequestBodySizeMiddleware(mock_app, config=LIMITED)
        scope = http_scope(headers={"Content-Length": "11"})

        sent = await run(middleware, scope, body_receiver(b"x" * 11))

        assert status_of(sent) == 413
        body = json_body(sent)
        assert body["error_code"] == "PAYLOAD_TOO_LARGE"
        assert body["details"] == {"max_bytes": 10, "content_length": 11}
        mock_app.assert_not_called()

    async def test_rejects_streamed_oversized_body(self) -> None:
        """Test a body without Content-Length is cut off once it crosses the limit."""
        middleware = RequestBodySizeMiddleware(reading_app, config=LIMITED)

        sent = await run(
            middleware, http_scope(), body_receiver(b"x" * 6, b"x" * 6, b"x" * 6)
        )

        assert status_of(sent) == 413
        assert json_body(sent)["details"] == {"max_bytes": 10, "content_length": 12}

    async def test_app_response_after_cut_off_is_replaced(self) -> None:
        """Test an app that swallows the error still ends with a single 413."""

        async def forgiving_app(scope: Scope, receive: Receive, send: Send) -> None:
            try:
                while (await receive()).get("more_body", False):
                    pass
            except Exception:
                await send(
                    {"type": "http.response.start", "status": 400, "headers": []}
                )
                await send({"type": "http.response.body", "body": b"bad body"})

        middleware = RequestBodySizeMiddleware(forgiving_app, config=LIMITED)

        sent = await run(middleware, http_scope(), body_receiver(b"x" * 8, b"x" * 8))

        starts = [m for m in sent if m["type"] == "http.response.start"]
        assert [m["status"] for m in starts] == [413]

    @pytest.mark.parametrize("chunks", [(b"x" * 10,), (b"x" * 5, b"x" * 5), (b"",)])
    async def test_allows_body_within_limit(self, chunks: tuple[bytes, ...]) -> None:
        """Test bodies up to the limit reach the app."""
        middleware = RequestBodySizeMiddleware(reading_app, config=LIMITED)

        sent = await run(middleware, http_scope(), body_receiver(*chunks))

        assert status_of(sent) == 200
        assert sent[1]["body"] == str(sum(map(len, chunks))).encode()

    @pytest.mark.parametrize("path", ["/upload", "/files/big.bin"])
    async def test_exempt_path(self, path: str) -> None:
        """Test exempt paths are never checked."""
        middleware = RequestBodySizeMiddleware(reading_app, config=LIMITED)
        scope = http_scope(path=path, headers={"Content-Length": "1000"})

        sent = await run(middleware, scope, body_receiver(b"x" * 1000))

        assert status_of(sent) == 200
        assert sent[1]["body"] == b"1000"

    async def test_non_http_scope_passes(
        self, mocker: MockerFixture, mock_app: MockType
    ) -> None:
        """Test lifespan and websocket scopes are forwarded untouched."""
        middleware = RequestBodySizeMiddleware(mock_app, config=LIMITED)
        scope = {"type": "lifespan"}
        receive, send = mocker.AsyncMock(), mocker.AsyncMock()

        await middleware(scope, receive, send)

        mock_app.assert_awaited_once_with(scope, receive, send)

    @pytest.mark.parametrize("max_bytes", [0, -5])
    def test_non_positive_limit_uses_default(
        self, mock_app: MockType, max_bytes: int
    ) -> None:
        """Test invalid limits fall back to 1 MiB."""
        config = default_request_body_size_config().apply(
            with_request_body_size_max_bytes(max_bytes)
        )

        middleware = RequestBodySizeMiddleware(mock_app, config=config)

        assert middleware.max_bytes == DEFAULT_MAX_BYTES
