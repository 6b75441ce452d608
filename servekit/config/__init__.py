"""Option-driven configuration for every servekit middleware.

Each module defines an immutable configuration model, a factory returning
its defaults and one option constructor per field:

- **options**: The shared ``Option`` type and ``OptionsModel`` base
- **server**: Aggregated server configuration and the default chain settings
- **rate_limit / circuit_breaker**: Traffic policies for external enforcers
- **cors / compress / content**: Cross-origin and content negotiation policies
- **security_headers / no_cache / set_header**: Response header policies
- **basic_auth / request_body_size / timeout / trailing_slash**: Request guards
- **request_id / request_logger / recover / real_ip**: Request bookkeeping

Configurations carry values only; the middlewares in
``servekit.api.middleware`` consume them.
"""
