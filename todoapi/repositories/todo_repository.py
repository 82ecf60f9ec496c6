from typing import List, Optional

from bson import ObjectId
from pymongo.errors import PyMongoError

from todoapi.core.exceptions import StorageError
from todoapi.database import MongoODM, is_object_id
from todoapi.models.documents import TodoDocument
from todoapi.models.todo import Todo, TodoChanges


class TodoRepository:
    """Todo store. Every lookup is keyed on both the todo id and its creator."""

    def __init__(self, db: MongoODM) -> None:
        self._db = db

    @property
    def _backend(self):
        return self._db.todo

    @staticmethod
    def _to_model(doc: TodoDocument) -> Todo:
        return Todo(
            id=str(doc.id),
            text=doc.text,
            creator=str(doc.creator),
            completed=doc.completed,
            completed_at=doc.completed_at,
        )

    @staticmethod
    def _owned(todo_id: str, creator_id: str) -> Optional[dict]:
        if not (is_object_id(todo_id) and is_object_id(creator_id)):
            return None
        return {"_id": ObjectId(todo_id), "creator": ObjectId(creator_id)}

    async def create(self, text: str, creator_id: str) -> Todo:
        try:
            doc = await self._backend.insert(
                {"text": text, "completed": False, "completed_at": None, "creator": ObjectId(creator_id)}
            )
        except PyMongoError as e:
            raise StorageError(f"Could not create todo: {e}") from e
        return self._to_model(doc)

    async def list_for_creator(self, creator_id: str) -> List[Todo]:
        if not is_object_id(creator_id):
            return []
        try:
            docs = await self._backend.find({"creator": ObjectId(creator_id)})
        except PyMongoError as e:
            raise StorageError(f"Could not list todos: {e}") from e
        return [self._to_model(doc) for doc in docs]

    async def get_for_creator(self, todo_id: str, creator_id: str) -> Optional[Todo]:
        query = self._owned(todo_id, creator_id)
        if query is None:
            return None
        try:
            doc = await self._backend.find_one(query)
        except PyMongoError as e:
            raise StorageError(f"Could not load todo: {e}") from e
        return self._to_model(doc) if doc else None

    async def update_for_creator(self, todo_id: str, creator_id: str, changes: TodoChanges) -> Optional[Todo]:
        """Apply ``changes`` and return the todo as stored afterwards, or None if no owned todo matched."""
        query = self._owned(todo_id, creator_id)
        if query is None:
            return None
        try:
            doc = await self._backend.update_one(query, {"$set": changes.as_update()})
        except PyMongoError as e:
            raise StorageError(f"Could not update todo: {e}") from e
        return self._to_model(doc) if doc else None

    async def delete_for_creator(self, todo_id: str, creator_id: str) -> Optional[Todo]:
        query = self._owned(todo_id, creator_id)
        if query is None:
            return None
        try:
            doc = await self._backend.delete_one(query)
        except PyMongoError as e:
            raise StorageError(f"Could not delete todo: {e}") from e
        return self._to_model(doc) if doc else None
