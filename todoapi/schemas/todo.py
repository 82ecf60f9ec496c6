"""Todo TaskSchemas."""

from todoapi.core.types import TaskSchema
from todoapi.models import TodoCreateRequest, TodoListResponse, TodoResponse, TodoUpdateRequest

CreateTodoSchema = TaskSchema(
    name="todoapi_create_todo",
    input_schema=TodoCreateRequest,
    output_schema=TodoResponse,
)

ListTodosSchema = TaskSchema(
    name="todoapi_list_todos",
    output_schema=TodoListResponse,
)

GetTodoSchema = TaskSchema(
    name="todoapi_get_todo",
    output_schema=TodoResponse,
)

UpdateTodoSchema = TaskSchema(
    name="todoapi_update_todo",
    input_schema=TodoUpdateRequest,
    output_schema=TodoResponse,
)

DeleteTodoSchema = TaskSchema(name="todoapi_delete_todo")

__all__ = [
    "CreateTodoSchema",
    "DeleteTodoSchema",
    "GetTodoSchema",
    "ListTodosSchema",
    "UpdateTodoSchema",
]
