"""Request context management for request ID propagation."""

from contextvars import ContextVar

# Context variable for storing the request ID across async boundaries
_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestContext:
    """Manages request context using contextvars for async-safe storage.

    The request ID middleware stores the ID here so that code running deeper
    in the call stack (handlers, error handlers, log calls) can read it
    without access to the request object.
    """

    @staticmethod
    def set_request_id(request_id: str) -> None:
        """Set the request ID for the current context.

        Args:
            request_id: The request ID to store in the context.
        """
        _request_id_var.set(request_id)

    @staticmethod
    def get_request_id() -> str | None:
        """Get the request ID from the current context.

        Returns:
            str | None: The request ID if set, None otherwise.
        """
        return _request_id_var.get()

    @staticmethod
    def clear() -> None:
        """Clear all context variables."""
        _request_id_var.set(None)


def get_request_id() -> str | None:
    """Return the request ID of the request being handled, if any."""
    return RequestContext.get_request_id()
