from __future__ import annotations

import logging
import uuid
from typing import Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from campus_api.api.middleware.request_context import REQUEST_ID_HEADER
from campus_api.core.errors import AccessDenied, CampusError
from campus_api.core.observability.metrics import HTTP_REQUESTS_TOTAL, normalize_path

log = logging.getLogger("campus.errors")


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Outermost guard for failures no domain error describes.

    The client gets a bare 500 carrying the request id (body and
    X-Request-Id header); the traceback, caller and path go to the log only.
    The request is still counted, since the inner request-context layer
    never sees a response for it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception:
            rid = (
                getattr(request.state, "request_id", None)
                or request.headers.get("x-request-id")
                or str(uuid.uuid4())
            )
            principal = getattr(request.state, "principal", None)
            log.exception(
                "unhandled error rid=%s method=%s path=%s sub=%s",
                rid,
                request.method,
                request.url.path,
                principal.subject if principal else None,
            )
            HTTP_REQUESTS_TOTAL.labels(
                method=request.method.upper(),
                path=normalize_path(request.url.path),
                status="500",
            ).inc()
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": rid},
                headers={REQUEST_ID_HEADER: rid},
            )


async def campus_error_handler(request: Request, exc: CampusError) -> JSONResponse:
    if isinstance(exc, AccessDenied):
        log.info("access denied method=%s path=%s reason=%s", request.method, request.url.path, exc.reason)
    elif exc.status_code >= 500:
        log.error("domain error method=%s path=%s message=%s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CampusError, campus_error_handler)
