"""Beanie Document models for the todo service's MongoDB collections."""

from typing import List, Optional

from beanie import Indexed, PydanticObjectId
from pydantic import Field

from todoapi.database import BaseDocument
from todoapi.models.auth import TokenEntry


class UserDocument(BaseDocument):
    """User document holding credentials and issued session tokens."""

    email: Indexed(str, unique=True)
    password: str  # Argon2 hash, never the plain password
    tokens: List[TokenEntry] = Field(default_factory=list)

    class Settings:
        name = "users"
        use_cache = False


class TodoDocument(BaseDocument):
    """Todo document, always scoped to its creator."""

    text: str
    completed: bool = False
    completed_at: Optional[int] = None
    creator: Indexed(PydanticObjectId)

    class Settings:
        name = "todos"
        use_cache = False


__all__ = [
    "TodoDocument",
    "UserDocument",
]
