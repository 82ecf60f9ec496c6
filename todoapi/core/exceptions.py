"""Error taxonomy raised by the todo service and mapped to HTTP responses."""

from fastapi import status


class TodoApiError(Exception):
    """Base class for errors that are returned to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(TodoApiError):
    """Malformed or missing required input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class AuthenticationError(TodoApiError):
    """Bad credentials, or a missing, invalid or revoked session token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class NotFoundError(TodoApiError):
    """Unknown id, malformed id, or a resource owned by someone else."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class StorageError(TodoApiError):
    """The persistence layer rejected or failed an operation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Storage operation failed"


class InvalidTokenError(Exception):
    """A session token failed signature or payload verification."""
