from todoapi.database.exceptions import DuplicateInsertError
from todoapi.database.mongo_odm import BaseDocument, MongoODM, MongoODMBackend, is_object_id

__all__ = [
    "BaseDocument",
    "DuplicateInsertError",
    "MongoODM",
    "MongoODMBackend",
    "is_object_id",
]
