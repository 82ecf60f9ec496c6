"""Shared constants for the todo service."""

from typing import FrozenSet

# Request/response header carrying the session token
DEFAULT_AUTH_HEADER = "x-auth"

# Paths that require a valid session token (the prefix itself and everything below it)
PROTECTED_PATH_PREFIXES: FrozenSet[str] = frozenset(
    {
        "/todos",
        "/users/me",
    }
)

# Request logging
REQUEST_ID_HEADER = "X-Request-ID"
IGNORED_LOG_PATHS: FrozenSet[str] = frozenset({"/favicon.ico", "/docs", "/openapi.json"})
