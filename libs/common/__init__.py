"""Common utilities shared across libraries (logging, log sanitization)."""

from libs.common.log_sanitizer import redact_auth_token, sanitize_dict

__all__ = [
    "redact_auth_token",
    "sanitize_dict",
]
