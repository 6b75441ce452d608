"""servekit - configurable middleware toolkit for FastAPI services.

servekit describes an HTTP server's middleware stack with immutable,
option-driven configuration objects and installs it on a FastAPI app.

Architecture Overview:
- **Config Layer**: Frozen pydantic models with default factories and options
- **Core Layer**: Settings, logging, errors and request context
- **API Layer**: Starlette middleware and the application factory

Rate limiting and circuit breaking are described by configuration only, for
enforcement by an external component.
"""
