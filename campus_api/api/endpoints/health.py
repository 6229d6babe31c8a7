from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

router = APIRouter()

log = logging.getLogger("campus.health")


@router.get("/health/live")
def live():
    return {"status": "ok"}


@router.get("/health/ready")
def ready(request: Request):
    """
    Readiness reflects ability to serve traffic: every repository's
    backing store must answer.
    """
    repositories = getattr(request.app.state, "repositories", {}) or {}
    problems = [f"store_unavailable:{name}" for name, repo in repositories.items() if not repo.healthy()]

    if problems:
        log.warning("not ready problems=%s", problems)
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "problems": problems},
        )

    return {"status": "ready"}
