"""
DocStore CRUD — Request Logging Middleware
===========================================

What:  One access-log line per CRUD request, naming the resource it touched.
How:   Splits the path into resource and document id, times the downstream
       call, and logs at a level chosen by the status class.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Example lines:
    PUT user/65a1f0c2e4b0a1b2c3d4e5f6 -> 404 (3.1ms) [a1b2c3d4]
    GET employee -> 200 (1.4ms) [9f8e7d6c]

Never logged: request bodies (user/employee records are personal data).
"""

import logging
import time
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from docstore_crud.middleware.request_id import request_id_var

logger = logging.getLogger("docstore_crud.access")

UNLOGGED_PATHS = frozenset({"/health"})


def split_resource_path(path: str) -> Tuple[str, Optional[str]]:
    """
    "/user" → ("user", None); "/user/<id>" → ("user", "<id>").

    Anything deeper than two segments keeps its tail in the id slot so the
    log line still shows what was requested.
    """
    resource, _, document_id = path.strip("/").partition("/")
    return resource, document_id or None


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Access log keyed by resource and document id.

    The structured `extra` fields (resource, document_id, status, ...) let a
    JSON log formatter index requests per record without parsing the message.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        resource, document_id = split_resource_path(request.url.path)
        target = f"{resource}/{document_id}" if document_id else resource
        rid = request_id_var.get("")

        logger.log(
            level_for_status(response.status_code),
            "%s %s -> %d (%.1fms) [%s]",
            request.method,
            target,
            response.status_code,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "resource": resource,
                "document_id": document_id,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                # request.client is None under some test transports
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response
