import asyncio
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from beanie import Document, UpdateResponse, init_beanie
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError

from todoapi.database.exceptions import DuplicateInsertError


class BaseDocument(Document):
    """
    Base document class for the todo service's MongoDB collections.

    Example:
        .. code-block:: python

            from todoapi.database import BaseDocument

            class Note(BaseDocument):
                body: str

                class Settings:
                    name = "notes"
    """

    class Settings:
        use_cache = False


def is_object_id(value: Any) -> bool:
    """Return True if ``value`` parses as a MongoDB ObjectId."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and ObjectId.is_valid(value)


T = TypeVar("T", bound=BaseDocument)


class MongoODMBackend(Generic[T]):
    """
    Per-model view over a :class:`MongoODM`.

    All operations initialize the parent ODM lazily, so a backend can be used
    right after construction. Initialization is shared, so every model
    registered on the parent is ready once any one of them has been touched.

    Args:
        model_cls: The document model class this backend operates on.
        parent: The multi-model ODM that owns the Motor client.
    """

    def __init__(self, model_cls: Type[T], parent: "MongoODM"):
        self.model_cls: Type[T] = model_cls
        self._parent_odm = parent

    async def initialize(self):
        await self._parent_odm.initialize()

    async def insert(self, obj: BaseModel | Mapping[str, Any]) -> T:
        """
        Insert a new document.

        Raises:
            DuplicateInsertError: If the document violates a unique index.
        """
        await self.initialize()
        data = obj.model_dump() if isinstance(obj, BaseModel) else dict(obj)
        doc = self.model_cls(**data)
        try:
            return await doc.insert()
        except DuplicateKeyError as e:
            raise DuplicateInsertError(f"Duplicate key error: {str(e)}") from e

    async def find(self, *args, **kwargs) -> List[T]:
        """
        Find documents matching the given Beanie expressions or raw query dicts.

        Example:
            .. code-block:: python

                todos = await backend.find({"creator": owner_id})
        """
        await self.initialize()
        return await self.model_cls.find(*args, **kwargs).to_list()

    async def find_one(self, *args, **kwargs) -> Optional[T]:
        await self.initialize()
        return await self.model_cls.find_one(*args, **kwargs)

    async def update_one(self, query: Mapping[str, Any], update: Mapping[str, Any]) -> Optional[T]:
        """Apply a raw update document to the first match and return it as it is after the update."""
        await self.initialize()
        return await self.model_cls.find_one(dict(query)).update(
            dict(update), response_type=UpdateResponse.NEW_DOCUMENT
        )

    async def delete_one(self, query: Mapping[str, Any]) -> Optional[T]:
        """Delete the first document matching ``query`` and return it, or None if nothing matched."""
        await self.initialize()
        doc = await self.model_cls.find_one(dict(query))
        if doc is None:
            return None
        await doc.delete()
        return doc


class MongoODM:
    """
    MongoDB ODM holding several document models on one Motor client.

    Each registered model is reachable as an attribute named after its key.

    Args:
        models: Mapping of attribute name to document class.
        db_uri: MongoDB connection URI string.
        db_name: Name of the MongoDB database to use.

    Example:
        .. code-block:: python

            db = MongoODM(
                models={"user": UserDocument, "todo": TodoDocument},
                db_uri="mongodb://localhost:27017",
                db_name="todoapi",
            )
            await db.initialize()
            todos = await db.todo.find({"creator": owner_id})
    """

    def __init__(self, models: Dict[str, Type[BaseDocument]], db_uri: str, db_name: str):
        self._models: Dict[str, Type[BaseDocument]] = dict(models)
        self.client = AsyncIOMotorClient(db_uri)
        self.db_name = db_name
        self._is_initialized = False
        self._init_lock = asyncio.Lock()
        self._model_odms: Dict[str, MongoODMBackend] = {
            name: MongoODMBackend(model_cls, parent=self) for name, model_cls in self._models.items()
        }

    def __getattr__(self, name: str) -> MongoODMBackend:
        model_odms = self.__dict__.get("_model_odms", {})
        if name in model_odms:
            return model_odms[name]
        raise AttributeError(f"'{type(self).__name__}' has no model named '{name}'")

    async def initialize(self):
        """Register all models with Beanie and create their indexes. Safe to call repeatedly."""
        if self._is_initialized:
            return
        async with self._init_lock:
            if not self._is_initialized:
                await init_beanie(
                    database=self.client[self.db_name],
                    document_models=list(self._models.values()),
                )
                self._is_initialized = True

    def close(self) -> None:
        self.client.close()
        self._is_initialized = False
