import time
import uuid
from typing import Any, Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from todoapi.core.constants import IGNORED_LOG_PATHS, REQUEST_ID_HEADER


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one structured record per request and tag responses with a request id.

    Example:
        .. code-block:: python

            service.app.add_middleware(
                RequestLoggingMiddleware,
                service_name=service.name,
                add_request_id_header=True,
                logger=service.logger,
            )
    """

    def __init__(
        self,
        app,
        service_name: str = "",
        add_request_id_header: bool = True,
        logger: Optional[Any] = None,
        ignored_paths: Optional[set[str]] = None,
    ):
        super().__init__(app)
        self.service_name = service_name
        self.add_request_id_header = add_request_id_header
        self.logger = logger or structlog.get_logger("todoapi.requests")
        self.ignored_paths = ignored_paths if ignored_paths is not None else set(IGNORED_LOG_PATHS)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self.logger.exception(
                "request_failed",
                service=self.service_name,
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise

        if request.url.path not in self.ignored_paths:
            self.logger.info(
                "request_completed",
                service=self.service_name,
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
        if self.add_request_id_header:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response
