"""API-related constants."""

# Connection upgrades (websockets) must not receive an error body
UPGRADE_CONNECTION = "upgrade"

# Security headers
CSP_HEADER = "Content-Security-Policy"
CSP_REPORT_ONLY_HEADER = "Content-Security-Policy-Report-Only"
HSTS_HEADER = "Strict-Transport-Security"
FORWARDED_PROTO_HEADERS = ("X-Forwarded-Proto", "X-Forwarded-Protocol")

# Basic auth
WWW_AUTHENTICATE_HEADER = "WWW-Authenticate"
