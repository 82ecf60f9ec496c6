from todoapi.core.auth_gate import AuthenticatedUser, AuthenticationGate
from todoapi.core.auth_middleware import AuthMiddleware, get_current_user
from todoapi.core.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    NotFoundError,
    StorageError,
    TodoApiError,
    ValidationError,
)
from todoapi.core.logging import get_logger, setup_logger
from todoapi.core.middleware import RequestLoggingMiddleware
from todoapi.core.security import hash_password, verify_password
from todoapi.core.service import Service
from todoapi.core.settings import TodoApiSettings, get_todoapi_config, reset_todoapi_config
from todoapi.core.tokens import TokenService
from todoapi.core.types import TaskSchema

__all__ = [
    "AuthMiddleware",
    "AuthenticatedUser",
    "AuthenticationError",
    "AuthenticationGate",
    "InvalidTokenError",
    "NotFoundError",
    "RequestLoggingMiddleware",
    "Service",
    "StorageError",
    "TaskSchema",
    "TodoApiError",
    "TodoApiSettings",
    "TokenService",
    "ValidationError",
    "get_current_user",
    "get_logger",
    "get_todoapi_config",
    "hash_password",
    "reset_todoapi_config",
    "setup_logger",
    "verify_password",
]
