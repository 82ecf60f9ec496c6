"""Resolve a session token to the user it authenticates."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from todoapi.core.exceptions import AuthenticationError, InvalidTokenError
from todoapi.models.user import User

if TYPE_CHECKING:
    from todoapi.core.tokens import TokenService
    from todoapi.repositories.user_repository import UserRepository


@dataclass
class AuthenticatedUser:
    """The caller of the current request. Lives only as long as the request."""

    user: User
    token: str

    @property
    def id(self) -> str:
        return self.user.id


class AuthenticationGate:
    """Admit or reject a request based on its session token.

    A token is admitted only when it verifies, the user it names exists, and it
    is still present in that user's stored tokens (so logged-out tokens are
    rejected even though their signature is still good).
    """

    def __init__(self, tokens: "TokenService", users: "UserRepository"):
        self._tokens = tokens
        self._users = users

    async def authenticate(self, token: Optional[str]) -> AuthenticatedUser:
        if not token:
            raise AuthenticationError("Not authenticated")

        try:
            user_id = self._tokens.verify(token)
        except InvalidTokenError as e:
            raise AuthenticationError("Invalid token") from e

        user = await self._users.get_by_id(user_id)
        if user is None:
            raise AuthenticationError("User not found")

        if not user.has_token(token):
            raise AuthenticationError("Token has been revoked")

        return AuthenticatedUser(user=user, token=token)
