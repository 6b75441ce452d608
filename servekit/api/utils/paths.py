"""Exempt path matching shared by the middlewares."""

from collections.abc import Iterable


def path_matches(request_path: str, exempt_path: str) -> bool:
    """Check whether a request path matches one exempt path entry.

    An entry matches its exact path. An entry ending in ``/`` also matches
    every path below it, so ``"/static/"`` covers ``"/static/app.js"``.

    Args:
        request_path: The path of the incoming request.
        exempt_path: One configured exempt path.

    Returns:
        bool: True if the request path is covered by the entry.
    """
    if request_path == exempt_path:
        return True
    return exempt_path.endswith("/") and request_path.startswith(exempt_path)


def is_exempt(request_path: str, exempt_paths: Iterable[str]) -> bool:
    """Check whether any exempt path entry covers the request path."""
    return any(path_matches(request_path, path) for path in exempt_paths)
