"""Input validation run before any store call.

Each function returns the cleaned value or raises ``ValidationError``.
"""

from dataclasses import dataclass
from typing import Callable

from email_validator import EmailNotValidError, validate_email

from todoapi.core.exceptions import ValidationError
from todoapi.models import CredentialsPayload, TodoChanges, TodoUpdateRequest
from todoapi.utils import now_ms


@dataclass(frozen=True)
class Registration:
    email: str
    password: str


def validate_registration(payload: CredentialsPayload, min_password_length: int = 6) -> Registration:
    email = payload.email.strip()
    if not email:
        raise ValidationError("Email is required")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"{email} is not a valid email") from e

    if len(payload.password) < min_password_length:
        raise ValidationError(f"Password must be at least {min_password_length} characters long")

    return Registration(email=email, password=payload.password)


def validate_todo_text(text: str | None) -> str:
    """Trim ``text`` and require something to be left."""
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Todo text is required")
    return cleaned


def build_todo_changes(payload: TodoUpdateRequest, clock: Callable[[], int] = now_ms) -> TodoChanges:
    """Turn a PATCH body into the fields to write.

    ``completed`` must be the boolean ``true`` to complete a todo, which stamps
    ``completedAt``. Anything else, including leaving it out, marks the todo
    as not completed and clears the timestamp.
    """
    text = validate_todo_text(payload.text) if payload.text is not None else None
    if payload.completed is True:
        return TodoChanges(text=text, completed=True, completed_at=clock())
    return TodoChanges(text=text, completed=False, completed_at=None)
