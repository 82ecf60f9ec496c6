"""Process-wide dependencies, built once at startup and passed to the service."""

from dataclasses import dataclass
from typing import Optional

from todoapi.core.auth_gate import AuthenticationGate
from todoapi.core.settings import TodoApiSettings, get_todoapi_config
from todoapi.core.tokens import TokenService
from todoapi.database import MongoODM
from todoapi.models.documents import TodoDocument, UserDocument
from todoapi.repositories import TodoRepository, UserRepository


@dataclass
class AppContext:
    settings: TodoApiSettings
    users: UserRepository
    todos: TodoRepository
    tokens: TokenService
    gate: AuthenticationGate
    db: Optional[MongoODM] = None

    @classmethod
    def build(
        cls,
        settings: TodoApiSettings,
        users: UserRepository,
        todos: TodoRepository,
        db: Optional[MongoODM] = None,
    ) -> "AppContext":
        """Wire the token service and gate around the given stores."""
        tokens = TokenService(
            users,
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            expires_in=settings.JWT_EXPIRES_IN,
        )
        return cls(
            settings=settings,
            users=users,
            todos=todos,
            tokens=tokens,
            gate=AuthenticationGate(tokens, users),
            db=db,
        )

    @classmethod
    def from_settings(cls, settings: Optional[TodoApiSettings] = None) -> "AppContext":
        """Build a context backed by MongoDB at ``settings.MONGO_URI``."""
        settings = settings or get_todoapi_config()
        db = MongoODM(
            models={"user": UserDocument, "todo": TodoDocument},
            db_uri=settings.MONGO_URI,
            db_name=settings.MONGO_DB,
        )
        return cls.build(settings, UserRepository(db), TodoRepository(db), db=db)

    async def startup(self) -> None:
        if self.db is not None:
            await self.db.initialize()

    async def shutdown(self) -> None:
        if self.db is not None:
            self.db.close()
