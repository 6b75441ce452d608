"""HTTP layer built on FastAPI and Starlette.

Key components:
- **main**: Application factory and middleware chain resolution
- **middleware**: Middleware implementations and exception handlers
- **schemas**: Pydantic models for error responses
- **utils**: orjson response class
"""
