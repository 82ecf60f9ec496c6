from typing import Optional

from bson import ObjectId
from pymongo.errors import PyMongoError

from todoapi.core.exceptions import StorageError
from todoapi.database import MongoODM, is_object_id
from todoapi.models.auth import TokenEntry
from todoapi.models.documents import UserDocument
from todoapi.models.user import User


class UserRepository:
    """Credential store backed by the ``users`` collection."""

    def __init__(self, db: MongoODM) -> None:
        self._db = db

    @property
    def _backend(self):
        return self._db.user

    @staticmethod
    def _to_model(doc: UserDocument) -> User:
        return User(
            id=str(doc.id),
            email=doc.email,
            password_hash=doc.password,
            tokens=list(doc.tokens),
        )

    async def create(self, email: str, password_hash: str) -> User:
        """Persist a new user with no tokens.

        Raises:
            DuplicateInsertError: If the email is already registered.
            StorageError: If the insert fails for any other reason.
        """
        try:
            doc = await self._backend.insert({"email": email, "password": password_hash, "tokens": []})
        except PyMongoError as e:
            raise StorageError(f"Could not create user: {e}") from e
        return self._to_model(doc)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        if not is_object_id(user_id):
            return None
        try:
            doc = await self._backend.find_one({"_id": ObjectId(user_id)})
        except PyMongoError as e:
            raise StorageError(f"Could not load user: {e}") from e
        if not doc:
            return None
        return self._to_model(doc)

    async def get_by_email(self, email: str) -> Optional[User]:
        try:
            doc = await self._backend.find_one({"email": email})
        except PyMongoError as e:
            raise StorageError(f"Could not load user: {e}") from e
        if not doc:
            return None
        return self._to_model(doc)

    async def push_token(self, user_id: str, entry: TokenEntry) -> None:
        """Append ``entry`` to the end of the user's tokens."""
        try:
            await self._backend.update_one(
                {"_id": ObjectId(user_id)},
                {"$push": {"tokens": entry.model_dump()}},
            )
        except PyMongoError as e:
            raise StorageError(f"Could not store token: {e}") from e

    async def pull_token(self, user_id: str, token: str) -> None:
        """Remove every entry holding ``token``. Does nothing if it is not there."""
        try:
            await self._backend.update_one(
                {"_id": ObjectId(user_id)},
                {"$pull": {"tokens": {"token": token}}},
            )
        except PyMongoError as e:
            raise StorageError(f"Could not remove token: {e}") from e
