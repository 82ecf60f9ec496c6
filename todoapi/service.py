"""Todo API service: user registration and sessions plus per-user todo lists."""

from typing import Optional

from fastapi import Body, Depends, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from todoapi.context import AppContext
from todoapi.core import (
    AuthenticationError,
    AuthMiddleware,
    NotFoundError,
    RequestLoggingMiddleware,
    Service,
    StorageError,
    TodoApiError,
    ValidationError,
    get_current_user,
    hash_password,
    verify_password,
)
from todoapi.core.validation import build_todo_changes, validate_registration, validate_todo_text
from todoapi.database import DuplicateInsertError, is_object_id
from todoapi.models import (
    CredentialsPayload,
    TodoCreateRequest,
    TodoListResponse,
    TodoResponse,
    TodoUpdateRequest,
    UserResponse,
)
from todoapi.schemas import (
    CreateTodoSchema,
    DeleteTodoSchema,
    GetTodoSchema,
    ListTodosSchema,
    LoginSchema,
    LogoutSchema,
    MeSchema,
    RegisterSchema,
    UpdateTodoSchema,
)

INVALID_BODY_MESSAGE = "Invalid JSON Format"
INVALID_CREDENTIALS = "Invalid email or password"


def todo_id_param(id: str) -> str:
    """Resolve the ``{id}`` path parameter. Runs before the body is validated, so a malformed id is a 404."""
    if not is_object_id(id):
        raise NotFoundError(f"Todo with id '{id}' not found")
    return id


class TodoApiService(Service):
    """Multi-tenant todo list service with token-based sessions.

    Example:
        ```python
        # Default settings (reads TODOAPI__* env vars)
        TodoApiService.launch()

        # Against an explicit context
        service = TodoApiService(context=AppContext.from_settings(settings))
        ```
    """

    def __init__(
        self,
        *,
        context: Optional[AppContext] = None,
        url: str | None = None,
        **kwargs,
    ):
        """Initialize TodoApiService.

        Args:
            context: Stores, token service and gate to serve from. Defaults to a
                MongoDB-backed context built from TODOAPI__* settings.
            url: Service URL override. Defaults to TODOAPI__URL.
            **kwargs: Passed to Service base class.
        """
        self.context = context or AppContext.from_settings()
        settings = self.context.settings

        kwargs.setdefault("use_structlog", True)

        super().__init__(
            url=url or settings.URL,
            summary="Todo API Service",
            description="Todo lists scoped to their owner, with registration, login and session tokens.",
            **kwargs,
        )
        self.auth_header = settings.AUTH_HEADER

        self.app.add_exception_handler(TodoApiError, self._handle_service_error)
        self.app.add_exception_handler(RequestValidationError, self._handle_invalid_body)

        self.app.add_middleware(AuthMiddleware, gate=self.context.gate, header_name=self.auth_header)

        self.app.add_middleware(
            RequestLoggingMiddleware,
            service_name=self.name,
            add_request_id_header=True,
            logger=self.logger,
        )

        # CORS - outermost, so rejections from the layers below carry CORS headers too
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=[self.auth_header],
        )

        self._register_user_endpoints()
        self._register_todo_endpoints()

    async def startup_initialize(self):
        await self.context.startup()
        await super().startup_initialize()

    async def shutdown_cleanup(self):
        """Close database connection on shutdown."""
        await super().shutdown_cleanup()
        await self.context.shutdown()

    # -------------------------------------------------------------------------
    # Endpoint registration
    # -------------------------------------------------------------------------

    def _register_user_endpoints(self) -> None:
        self.add_endpoint(
            "/users",
            self.register,
            schema=RegisterSchema,
            methods=["POST"],
            api_route_kwargs={"status_code": status.HTTP_201_CREATED},
        )
        self.add_endpoint("/users/login", self.login, schema=LoginSchema, methods=["POST"])
        self.add_endpoint("/users/me", self.me, schema=MeSchema, methods=["GET"])
        self.add_endpoint(
            "/users/me/token",
            self.logout,
            schema=LogoutSchema,
            methods=["DELETE"],
            api_route_kwargs={"status_code": status.HTTP_204_NO_CONTENT, "response_model": None},
        )

    def _register_todo_endpoints(self) -> None:
        self.add_endpoint(
            "/todos",
            self.create_todo,
            schema=CreateTodoSchema,
            methods=["POST"],
            api_route_kwargs={"status_code": status.HTTP_201_CREATED},
        )
        self.add_endpoint("/todos", self.list_todos, schema=ListTodosSchema, methods=["GET"])
        self.add_endpoint("/todos/{id}", self.get_todo, schema=GetTodoSchema, methods=["GET"])
        self.add_endpoint(
            "/todos/{id}",
            self.update_todo,
            schema=UpdateTodoSchema,
            methods=["PATCH"],
            api_route_kwargs={"status_code": status.HTTP_201_CREATED},
        )
        self.add_endpoint(
            "/todos/{id}",
            self.delete_todo,
            schema=DeleteTodoSchema,
            methods=["DELETE"],
            api_route_kwargs={"status_code": status.HTTP_204_NO_CONTENT, "response_model": None},
        )

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    async def _handle_service_error(self, request: Request, exc: TodoApiError) -> JSONResponse:
        if isinstance(exc, StorageError):
            self.logger.warning("storage_error", path=request.url.path, detail=exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    async def _handle_invalid_body(self, request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": INVALID_BODY_MESSAGE, "detail": jsonable_encoder(exc.errors())},
        )

    # -------------------------------------------------------------------------
    # User handlers
    # -------------------------------------------------------------------------

    async def register(self, payload: CredentialsPayload, response: Response) -> UserResponse:
        """Create an account and start its first session."""
        registration = validate_registration(payload, self.context.settings.MIN_PASSWORD_LENGTH)
        password_hash = await run_in_threadpool(hash_password, registration.password)

        try:
            user = await self.context.users.create(registration.email, password_hash)
        except DuplicateInsertError as e:
            self.logger.info("registration_rejected", reason="duplicate_email")
            raise ValidationError(f"{registration.email} is already registered") from e

        token = await self.context.tokens.issue(user.id)
        response.headers[self.auth_header] = token
        self.logger.info("user_registered", user_id=user.id)
        return UserResponse(id=user.id, email=user.email)

    async def login(self, payload: CredentialsPayload, response: Response) -> UserResponse:
        """Check credentials and start a new session alongside any existing ones."""
        user = await self.context.users.get_by_email(payload.email.strip())
        if user is None or not await run_in_threadpool(verify_password, payload.password, user.password_hash):
            self.logger.info("login_failed")
            raise AuthenticationError(INVALID_CREDENTIALS)

        token = await self.context.tokens.issue(user.id)
        response.headers[self.auth_header] = token
        self.logger.info("user_logged_in", user_id=user.id)
        return UserResponse(id=user.id, email=user.email)

    async def me(self, request: Request) -> UserResponse:
        current = get_current_user(request)
        return UserResponse(id=current.user.id, email=current.user.email)

    async def logout(self, request: Request) -> None:
        """End the session of the token used for this request."""
        current = get_current_user(request)
        await self.context.tokens.revoke(current.id, current.token)
        self.logger.info("user_logged_out", user_id=current.id)

    # -------------------------------------------------------------------------
    # Todo handlers
    # -------------------------------------------------------------------------

    async def create_todo(self, payload: TodoCreateRequest, request: Request) -> TodoResponse:
        current = get_current_user(request)
        text = validate_todo_text(payload.text)
        todo = await self.context.todos.create(text, current.id)
        self.logger.info("todo_created", todo_id=todo.id, user_id=current.id)
        return TodoResponse.from_todo(todo)

    async def list_todos(self, request: Request) -> TodoListResponse:
        current = get_current_user(request)
        todos = await self.context.todos.list_for_creator(current.id)
        return TodoListResponse(results=[TodoResponse.from_todo(t) for t in todos])

    async def get_todo(self, request: Request, todo_id: str = Depends(todo_id_param)) -> TodoResponse:
        current = get_current_user(request)
        todo = await self.context.todos.get_for_creator(todo_id, current.id)
        if todo is None:
            raise NotFoundError(f"Todo with id '{todo_id}' not found")
        return TodoResponse.from_todo(todo)

    async def update_todo(
        self,
        request: Request,
        todo_id: str = Depends(todo_id_param),
        payload: Optional[TodoUpdateRequest] = Body(None),
    ) -> TodoResponse:
        """Apply a partial update. Leaving out ``completed``, or the whole body, marks the todo as not done."""
        current = get_current_user(request)
        if payload is None:
            payload = TodoUpdateRequest()
        changes = build_todo_changes(payload)
        todo = await self.context.todos.update_for_creator(todo_id, current.id, changes)
        if todo is None:
            raise NotFoundError(f"Todo with id '{todo_id}' not found")
        self.logger.info("todo_updated", todo_id=todo.id, user_id=current.id, completed=todo.completed)
        return TodoResponse.from_todo(todo)

    async def delete_todo(self, request: Request, todo_id: str = Depends(todo_id_param)) -> None:
        current = get_current_user(request)
        todo = await self.context.todos.delete_for_creator(todo_id, current.id)
        if todo is None:
            raise NotFoundError(f"Todo with id '{todo_id}' not found")
        self.logger.info("todo_deleted", todo_id=todo.id, user_id=current.id)
