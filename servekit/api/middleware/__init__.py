"""Starlette middleware consuming the servekit configurations.

Built-in chain, executed in this order on the way in:
1. **RequestIDMiddleware**: Assigns and propagates the request ID
2. **RecoverMiddleware**: Turns unhandled exceptions into 500 responses
3. **RequestBodySizeMiddleware**: Rejects oversized or overlong bodies with 413
4. **SecurityHeadersMiddleware**: Adds CSP, HSTS and related headers
5. **RequestLoggerMiddleware**: Logs each completed request

Opt-in middleware:
- **BasicAuthMiddleware**, **ContentTypeMiddleware**,
  **ContentCharsetMiddleware**, **ContentEncodingMiddleware**,
  **NoCacheMiddleware**, **RealIPMiddleware**, **SetHeaderMiddleware**, **TimeoutMiddleware**,
  **TrailingSlashMiddleware** and ``cors_middleware``

The **error_handler** module registers the exception handlers that give
every error response the same JSON shape.
"""
