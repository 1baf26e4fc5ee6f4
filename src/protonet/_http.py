"""Small HTTP-related constants shared across protonet.

This module is intentionally tiny to avoid circular imports and drift.
"""

from __future__ import annotations

# Schemes a composed request URL may use.
ALLOWED_URL_SCHEMES: frozenset[str] = frozenset({"http", "https"})

# Header names whose values are redacted from reprs and never logged.
SENSITIVE_HEADER_NAMES: frozenset[str] = frozenset(
    {"authorization", "proxy-authorization", "cookie", "set-cookie"}
)
SENSITIVE_HEADER_SUFFIXES: tuple[str, ...] = ("-key", "-token", "-secret")


def is_sensitive_header(name: str) -> bool:
    """Return True if *name* carries credentials."""
    lowered = name.lower()
    return lowered in SENSITIVE_HEADER_NAMES or lowered.endswith(
        SENSITIVE_HEADER_SUFFIXES
    )
