from .todo import CreateTodoSchema, DeleteTodoSchema, GetTodoSchema, ListTodosSchema, UpdateTodoSchema
from .user import LoginSchema, LogoutSchema, MeSchema, RegisterSchema

__all__ = [
    "CreateTodoSchema",
    "DeleteTodoSchema",
    "GetTodoSchema",
    "ListTodosSchema",
    "LoginSchema",
    "LogoutSchema",
    "MeSchema",
    "RegisterSchema",
    "UpdateTodoSchema",
]
