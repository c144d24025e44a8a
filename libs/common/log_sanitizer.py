"""Credential masking utilities for logs."""

from __future__ import annotations

import re
from typing import Any

# Matches the AUTHTOKEN query parameter of vault REST URLs (case-insensitive).
AUTH_TOKEN_PATTERN = re.compile(r"(?i)(\bAUTHTOKEN=)[^&#\s]*")

REDACTED = "***"

_SENSITIVE_KEY_PARTS = ("password", "secret", "token")


def redact_auth_token(text: str) -> str:
    """Replace the value of any AUTHTOKEN query parameter with a placeholder.

    Example:
        >>> redact_auth_token("https://pmp/restapi/json/v1/resources?AUTHTOKEN=abc")
        'https://pmp/restapi/json/v1/resources?AUTHTOKEN=***'
    """
    return AUTH_TOKEN_PATTERN.sub(lambda m: f"{m.group(1)}{REDACTED}", text)


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(part in lowered for part in _SENSITIVE_KEY_PARTS)


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively mask values stored under password/secret/token keys.

    Only the value is replaced; the key stays so the log still shows which
    field was present.
    """
    sanitized: dict[str, Any] = {}
    for raw_key, raw_value in data.items():
        if _is_sensitive_key(str(raw_key)):
            sanitized[raw_key] = REDACTED
        elif isinstance(raw_value, dict):
            sanitized[raw_key] = sanitize_dict(raw_value)
        else:
            sanitized[raw_key] = raw_value
    return sanitized
