"""Core infrastructure package for shared functionality.

- **settings**: Environment-driven settings and their conversion to a config
- **context**: Request ID propagation through context variables
- **exceptions**: Structured exception hierarchy with error codes
- **logging**: Loguru setup with console and JSON formatters
- **constants**: Shared header names and default addresses
- **types**: Type aliases for pluggable strategy hooks
"""
