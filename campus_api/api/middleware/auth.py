from __future__ import annotations

import logging
import re
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from campus_api.core.auth.provider import AuthError

log = logging.getLogger("campus.auth")

_PUBLIC_NOAUTH_PATHS = [
    re.compile(r"^/health/(live|ready)$"),
    re.compile(r"^/metrics$"),
]


def _is_public_noauth_path(path: str) -> bool:
    return any(pat.match(path) for pat in _PUBLIC_NOAUTH_PATHS)


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Authentication boundary.

    Resolves request.state.principal from the configured provider. Missing or
    invalid credentials leave the principal as None; the authorization gate in
    each controller operation turns that into a 403. Nothing is rejected here.
    """

    def __init__(self, app, *, provider):
        super().__init__(app)
        self.provider = provider

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.principal = None

        path = request.url.path
        if _is_public_noauth_path(path):
            return await call_next(request)

        try:
            request.state.principal = self.provider.authenticate(request)
        except AuthError as e:
            log.info("authn anonymous method=%s path=%s reason=%s", request.method, path, str(e))

        return await call_next(request)
