"""Unit tests for request context propagation."""

import asyncio

import pytest

from servekit.core.context import RequestContext, get_request_id


@pytest.mark.unit
class TestRequestContext:
    """Test the request ID context variable."""

    def test_default_is_none(self) -> None:
        """Test no request ID is set outside a request."""
        assert RequestContext.get_request_id() is None
        assert get_request_id() is None

    def test_set_and_clear(self) -> None:
        """Test setting and clearing the request ID."""
        RequestContext.set_request_id("abc")

        assert get_request_id() == "abc"

        RequestContext.clear()

        assert get_request_id() is None

    async def test_isolated_between_tasks(self) -> None:
        """Test concurrent tasks each see their own request ID."""

        async def handle(request_id: str) -> str | None:
            RequestContext.set_request_id(request_id)
            await asyncio.sleep(0)
            return get_request_id()

        results = await asyncio.gather(*(handle(f"id-{i}") for i in range(10)))

        assert results == [f"id-{i}" for i in range(10)]
