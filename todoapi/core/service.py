"""Base class for FastAPI-backed services."""

from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

import uvicorn
from fastapi import FastAPI

from todoapi.core.logging import get_logger
from todoapi.core.settings import get_todoapi_config
from todoapi.core.types import EndpointsOutput, EndpointsSchema, StatusOutput, StatusSchema, TaskSchema


def ifnone(val, default):
    return default if val is None else val


class Service:
    """Own a FastAPI app, its logger and the registry of endpoints served by it.

    Subclasses register their handlers with :meth:`add_endpoint` and may override
    :meth:`startup_initialize` / :meth:`shutdown_cleanup`, which run from the
    app's lifespan.

    Example:
        .. code-block:: python

            class EchoService(Service):
                def __init__(self, **kwargs):
                    super().__init__(summary="Echo", **kwargs)
                    self.add_endpoint("/echo", self.echo, schema=EchoSchema)

                def echo(self, payload: EchoInput) -> EchoOutput:
                    return EchoOutput(echoed=payload.message)

            EchoService.launch(url="http://localhost:8080")
    """

    def __init__(
        self,
        *,
        url: str | None = None,
        summary: str | None = None,
        description: str | None = None,
        use_structlog: bool | None = None,
        logger: Any = None,
    ):
        self.name = type(self).__name__
        self.logger = logger or get_logger(self.name, use_structlog=use_structlog)
        self._url = self.build_url(url)
        self._endpoints: List[str] = []
        self._endpoints_metadata: Dict[str, Dict[str, Any]] = {}
        self._tasks: Dict[str, TaskSchema] = {}

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            await self.startup_initialize()
            try:
                yield
            finally:
                await self.shutdown_cleanup()

        self.app = FastAPI(
            title=self.name,
            summary=summary or self.name,
            description=description or "",
            lifespan=lifespan,
        )

        self.add_endpoint("/status", self.status, schema=StatusSchema, methods=["GET"])
        self.add_endpoint("/endpoints", self.endpoints, schema=EndpointsSchema, methods=["GET"])

    @property
    def url(self) -> str:
        return self._url

    @property
    def tasks(self) -> Dict[str, TaskSchema]:
        return self._tasks

    @staticmethod
    def build_url(url: str | None = None) -> str:
        """Normalize ``url``, falling back to TODOAPI__URL."""
        url = url or get_todoapi_config().URL
        if "://" not in url:
            url = f"http://{url}"
        return url.rstrip("/")

    def add_endpoint(
        self,
        path: str,
        func: Callable,
        schema: Optional[TaskSchema] = None,
        methods: list[str] | None = None,
        api_route_kwargs: Optional[Dict[str, Any]] = None,
    ):
        """Register ``func`` as a route handler and record its task schema."""
        path = path.removeprefix("/")
        methods = ifnone(methods, default=["POST"])
        api_route_kwargs = ifnone(api_route_kwargs, default={})
        if path not in self._endpoints:
            self._endpoints.append(path)
        self._endpoints_metadata.setdefault(path, {"methods": []})["methods"].extend(methods)
        self.app.add_api_route("/" + path, endpoint=func, methods=methods, **api_route_kwargs)
        if schema is not None:
            self._tasks[schema.name] = schema
        else:
            self.logger.warning(f"No task schema provided for endpoint {path}.")

    def status(self) -> StatusOutput:
        return StatusOutput(status="Available")

    def endpoints(self) -> EndpointsOutput:
        return EndpointsOutput(
            endpoints=[
                f"{method} /{path}"
                for path in self._endpoints
                for method in self._endpoints_metadata[path]["methods"]
            ]
        )

    async def startup_initialize(self):
        """Hook run when the app starts serving."""
        self.logger.info("service_started", service=self.name, url=self._url)

    async def shutdown_cleanup(self):
        """Hook run when the app stops serving."""
        self.logger.info("service_stopped", service=self.name)

    @classmethod
    def launch(cls, url: str | None = None, log_level: str = "info", **kwargs):
        """Create the service and serve it with uvicorn until interrupted."""
        service = cls(url=url, **kwargs)
        parsed = urlparse(service.url)
        uvicorn.run(service.app, host=parsed.hostname or "localhost", port=parsed.port or 80, log_level=log_level)
        return service
