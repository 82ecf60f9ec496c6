from .auth import AUTH_ACCESS, CredentialsPayload, TokenEntry, UserResponse
from .todo import (
    Todo,
    TodoChanges,
    TodoCreateRequest,
    TodoListResponse,
    TodoResponse,
    TodoUpdateRequest,
)
from .user import User

__all__ = [
    "AUTH_ACCESS",
    "CredentialsPayload",
    "TokenEntry",
    "UserResponse",
    "Todo",
    "TodoChanges",
    "TodoCreateRequest",
    "TodoListResponse",
    "TodoResponse",
    "TodoUpdateRequest",
    "User",
]
