"""Fixtures for todoapi unit tests: in-memory stores behind a real service."""

from dataclasses import replace
from typing import Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from todoapi.context import AppContext
from todoapi.core.settings import TodoApiSettings, get_todoapi_config, reset_todoapi_config
from todoapi.database import DuplicateInsertError, is_object_id
from todoapi.models import Todo, TodoChanges, TokenEntry, User
from todoapi.service import TodoApiService


class FakeUserRepository:
    """In-memory stand-in for UserRepository with the same unique-email rule."""

    def __init__(self):
        self.users: Dict[str, User] = {}

    @staticmethod
    def _copy(user: User) -> User:
        return replace(user, tokens=list(user.tokens))

    def by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    async def create(self, email: str, password_hash: str) -> User:
        if self.by_email(email) is not None:
            raise DuplicateInsertError(f"Duplicate key error: {email}")
        user = User(id=str(ObjectId()), email=email, password_hash=password_hash, tokens=[])
        self.users[user.id] = user
        return self._copy(user)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        user = self.users.get(user_id)
        return self._copy(user) if user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        user = self.by_email(email)
        return self._copy(user) if user else None

    async def push_token(self, user_id: str, entry: TokenEntry) -> None:
        if user_id in self.users:
            self.users[user_id].tokens.append(entry)

    async def pull_token(self, user_id: str, token: str) -> None:
        user = self.users.get(user_id)
        if user:
            user.tokens = [t for t in user.tokens if t.token != token]


class FakeTodoRepository:
    """In-memory stand-in for TodoRepository, keyed on (id, creator)."""

    def __init__(self):
        self.todos: Dict[str, Todo] = {}

    def _owned(self, todo_id: str, creator_id: str) -> Optional[Todo]:
        if not is_object_id(todo_id):
            return None
        todo = self.todos.get(todo_id)
        if todo is None or todo.creator != creator_id:
            return None
        return todo

    async def create(self, text: str, creator_id: str) -> Todo:
        todo = Todo(id=str(ObjectId()), text=text, creator=creator_id)
        self.todos[todo.id] = todo
        return replace(todo)

    async def list_for_creator(self, creator_id: str) -> List[Todo]:
        return [replace(t) for t in self.todos.values() if t.creator == creator_id]

    async def get_for_creator(self, todo_id: str, creator_id: str) -> Optional[Todo]:
        todo = self._owned(todo_id, creator_id)
        return replace(todo) if todo else None

    async def update_for_creator(self, todo_id: str, creator_id: str, changes: TodoChanges) -> Optional[Todo]:
        todo = self._owned(todo_id, creator_id)
        if todo is None:
            return None
        updated = replace(todo, **changes.as_update())
        self.todos[todo_id] = updated
        return replace(updated)

    async def delete_for_creator(self, todo_id: str, creator_id: str) -> Optional[Todo]:
        todo = self._owned(todo_id, creator_id)
        if todo is None:
            return None
        return self.todos.pop(todo_id)


@pytest.fixture(autouse=True)
def _todoapi_test_env(monkeypatch):
    """Keep log files out of the home directory and start every test from fresh settings."""
    monkeypatch.setenv("TODOAPI__LOG_TO_FILE", "false")
    reset_todoapi_config()
    yield
    reset_todoapi_config()


@pytest.fixture
def settings() -> TodoApiSettings:
    return get_todoapi_config()


@pytest.fixture
def users() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def todos() -> FakeTodoRepository:
    return FakeTodoRepository()


@pytest.fixture
def context(settings, users, todos) -> AppContext:
    return AppContext.build(settings, users, todos)


@pytest.fixture
def service(context) -> TodoApiService:
    return TodoApiService(context=context)


@pytest.fixture
def client(service) -> TestClient:
    return TestClient(service.app)


@pytest.fixture
def signup(client):
    """Register a user through the API and return ``(body, token)``."""

    def _signup(email: str = "alice@mail.com", password: str = "pass123"):
        response = client.post("/users", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        return response.json(), response.headers["x-auth"]

    return _signup
