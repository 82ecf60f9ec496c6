"""todoapi - per-user todo lists behind token-based sessions.

This package exposes TodoApiService, its application context and the
configuration helpers.
"""

from .context import AppContext
from .core.settings import TodoApiSettings, get_todoapi_config
from .service import TodoApiService

__all__ = [
    "AppContext",
    "TodoApiService",
    "TodoApiSettings",
    "get_todoapi_config",
]
