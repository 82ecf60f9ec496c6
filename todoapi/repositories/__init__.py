from .todo_repository import TodoRepository
from .user_repository import UserRepository

__all__ = [
    "TodoRepository",
    "UserRepository",
]
