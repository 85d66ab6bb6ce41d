"""HTTP Middleware: request ids, access logging and the server-wide request timeout.

Invariants:
    - Every response carries X-Request-ID (echoed from the request or generated)
    - Every request is logged once on completion with method, path, status, duration
    - A handler running past timeout_seconds is cancelled and answered with 504
      REQUEST_TIMEOUT, unless it already started sending its response

Design Decisions:
    - TimeoutMiddleware is plain ASGI: no BaseHTTPMiddleware task group wraps the cancelled handler
    - The request-context middleware is registered last (outermost) and sees timeout responses
"""

import asyncio
import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from employee_service.core.errors import RequestTimeoutError

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class TimeoutMiddleware:
    """Abort a request handler that exceeds timeout_seconds."""

    def __init__(self, app: ASGIApp, timeout_seconds: float):
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(
                self.app(scope, receive, send_wrapper),
                timeout=self.timeout_seconds,
            )
        except TimeoutError:
            if response_started:
                raise
            exc = RequestTimeoutError(self.timeout_seconds)
            logger.warning(
                f"Request timed out: {scope['method']} {scope['path']}",
                extra={"error_code": exc.code, "path": scope["path"]},
            )
            response = JSONResponse(
                status_code=exc.http_status, content=exc.to_response(),
            )
            await response(scope, receive, send)


def register_middleware(app: FastAPI, request_timeout_seconds: float) -> None:
    """Install timeout (inner) and request-context (outer) middleware."""
    app.add_middleware(
        TimeoutMiddleware, timeout_seconds=request_timeout_seconds,
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
