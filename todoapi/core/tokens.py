"""Signed session tokens bound to a user id."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Dict

import jwt

from todoapi.core.exceptions import InvalidTokenError
from todoapi.models.auth import AUTH_ACCESS, TokenEntry

if TYPE_CHECKING:
    from todoapi.repositories.user_repository import UserRepository


class TokenService:
    """Issues, verifies and revokes session tokens.

    Tokens are HS256 JWTs carrying ``{"_id": <user id>, "access": "auth"}`` plus a
    random ``jti`` so that every issued token is a distinct string. Verification
    is self-contained; revocation works by removing the token from the list kept
    on the user, which the authentication gate checks.
    """

    def __init__(
        self,
        users: "UserRepository",
        secret: str,
        algorithm: str = "HS256",
        expires_in: int = 0,
    ):
        self._users = users
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    def encode(self, user_id: str) -> str:
        """Sign a new token for ``user_id`` without storing it."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "_id": user_id,
            "access": AUTH_ACCESS,
            "jti": uuid.uuid4().hex,
            "iat": int(now.timestamp()),
        }
        if self._expires_in > 0:
            payload["exp"] = int((now + timedelta(seconds=self._expires_in)).timestamp())
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    async def issue(self, user_id: str) -> str:
        """Sign a token for ``user_id`` and append it to the user's stored tokens."""
        token = self.encode(user_id)
        await self._users.push_token(user_id, TokenEntry(access=AUTH_ACCESS, token=token))
        return token

    def verify(self, token: str) -> str:
        """Validate a token's signature and payload and return the user id it was issued to.

        Raises:
            InvalidTokenError: If the signature does not verify, the token has
                expired, the payload is malformed, or ``access`` is not "auth".
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

        if payload.get("access") != AUTH_ACCESS:
            raise InvalidTokenError("Token was not issued for authentication")

        user_id = payload.get("_id")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Token payload has no user id")
        return user_id

    async def revoke(self, user_id: str, token: str) -> None:
        """Remove ``token`` from the user's stored tokens. Removing an absent token is a no-op."""
        await self._users.pull_token(user_id, token)
