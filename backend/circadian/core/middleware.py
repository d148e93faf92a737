"""Request id binding and access logging."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from circadian.core.logging import request_id_ctx_var

REQUEST_ID_HEADER = "X-Request-Id"

access_logger = logging.getLogger("circadian.http")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Reuse the caller's ``X-Request-Id`` or mint one, expose it as
    ``request.state.request_id`` and on log records, and echo it back.
    """

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        token = request_id_ctx_var.set(request_id)
        start = perf_counter()

        try:
            response = await call_next(request)
            access_logger.info(
                "%s %s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (perf_counter() - start) * 1000,
            )
        finally:
            request_id_ctx_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
