"""Type aliases for pluggable strategy hooks.

This module centralizes type definitions for the function-valued fields
carried by middleware configurations, giving each hook a clear semantic
name instead of a bare ``Callable`` signature.

Hooks receive a Starlette ``Request`` and must not consume its body.
"""

from collections.abc import Callable

from starlette.requests import Request

# Maps an inbound request to a partition key (rate limit or circuit scope)
type KeyExtractor = Callable[[Request], str]

# Maps an inbound request to the real client IP address
type IPExtractor = Callable[[Request], str]

# Decides whether a (request, status code) pair counts as a failure
type FailureClassifier = Callable[[Request, int], bool]

# Produces a new request identifier
type IDGenerator = Callable[[], str]

# Validates a (username, password) pair for basic authentication
type CredentialValidator = Callable[[str, str], bool]
