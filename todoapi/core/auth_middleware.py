"""Authentication middleware for the todo service."""

from typing import Iterable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response

from todoapi.core.auth_gate import AuthenticatedUser, AuthenticationGate
from todoapi.core.constants import DEFAULT_AUTH_HEADER, PROTECTED_PATH_PREFIXES
from todoapi.core.exceptions import AuthenticationError, TodoApiError


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Middleware that runs the authentication gate on protected paths.

    Reads the session token from the auth header, resolves it through the
    gate and attaches the resulting AuthenticatedUser to ``request.state.user``.
    Rejected requests get a 401 JSON response and never reach the endpoint; a
    store failure while resolving the token gets the StorageError status.
    Paths outside ``protected_prefixes`` and CORS preflight requests pass through.
    """

    def __init__(
        self,
        app,
        gate: AuthenticationGate,
        header_name: str = DEFAULT_AUTH_HEADER,
        protected_prefixes: Optional[Iterable[str]] = None,
    ):
        super().__init__(app)
        self.gate = gate
        self.header_name = header_name
        self.protected_prefixes = tuple(protected_prefixes or PROTECTED_PATH_PREFIXES)

    def is_protected(self, path: str) -> bool:
        path = path.rstrip("/") or "/"
        return any(path == prefix or path.startswith(prefix + "/") for prefix in self.protected_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS" or not self.is_protected(request.url.path):
            return await call_next(request)

        token = request.headers.get(self.header_name)
        try:
            request.state.user = await self.gate.authenticate(token)
        except TodoApiError as e:
            return JSONResponse(
                status_code=e.status_code,
                content={"detail": e.detail},
            )

        return await call_next(request)


def get_current_user(request: Request) -> AuthenticatedUser:
    """Return the caller bound by AuthMiddleware."""
    user = getattr(request.state, "user", None)
    if not isinstance(user, AuthenticatedUser):
        raise AuthenticationError("Not authenticated")
    return user
