"""Core application constants."""

# Request ID propagation
REQUEST_ID_HEADER = "X-Request-Id"
REQUEST_ID_CONTEXT_KEY = "request_id"

# Server addresses
DEFAULT_ADDR = "localhost:8080"
DEFAULT_TLS_ADDR = "localhost:8443"
