"""Todo records and their request/response models.

The stored entity is ``TodoDocument`` in models/documents.py; repositories hand
out the plain ``Todo`` dataclass below.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class Todo:
    id: str
    text: str
    creator: str
    completed: bool = False
    completed_at: Optional[int] = None


@dataclass(frozen=True)
class TodoChanges:
    """A validated partial update. ``text`` is None when the caller left it out."""

    completed: bool
    completed_at: Optional[int]
    text: Optional[str] = None

    def as_update(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "completed": self.completed,
            "completed_at": self.completed_at,
        }
        if self.text is not None:
            fields["text"] = self.text
        return fields


class TodoCreateRequest(BaseModel):
    """Request model for creating a todo. Unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    text: str = Field(..., description="What needs doing")


class TodoUpdateRequest(BaseModel):
    """Request model for updating a todo. Only ``text`` and ``completed`` are read."""

    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = Field(None, description="Updated text")
    # Only the JSON literal true completes a todo, so no bool coercion here.
    completed: Any = Field(None, description="Whether the todo is done")


class TodoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Todo ID")
    text: str
    completed: bool = False
    completed_at: Optional[int] = Field(None, alias="completedAt", description="Completion time, epoch ms")
    creator: str = Field(..., alias="_creator", description="ID of the owning user")

    @classmethod
    def from_todo(cls, todo: Todo) -> "TodoResponse":
        return cls(
            id=todo.id,
            text=todo.text,
            completed=todo.completed,
            completed_at=todo.completed_at,
            creator=todo.creator,
        )


class TodoListResponse(BaseModel):
    results: List[TodoResponse]
    code: int = 200
