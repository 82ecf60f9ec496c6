"""User TaskSchemas."""

from todoapi.core.types import TaskSchema
from todoapi.models import CredentialsPayload, UserResponse

RegisterSchema = TaskSchema(
    name="todoapi_register",
    input_schema=CredentialsPayload,
    output_schema=UserResponse,
)

LoginSchema = TaskSchema(
    name="todoapi_login",
    input_schema=CredentialsPayload,
    output_schema=UserResponse,
)

MeSchema = TaskSchema(
    name="todoapi_me",
    output_schema=UserResponse,
)

LogoutSchema = TaskSchema(name="todoapi_logout")

__all__ = [
    "LoginSchema",
    "LogoutSchema",
    "MeSchema",
    "RegisterSchema",
]
