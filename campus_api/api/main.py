from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI

from campus_api import __version__
from campus_api.api.endpoints import health, metrics_export
from campus_api.api.endpoints.crud import build_router
from campus_api.api.middleware.auth import AuthMiddleware
from campus_api.api.middleware.error_shaping import SafeErrorMiddleware, install_error_handlers
from campus_api.api.middleware.request_context import RequestContextMiddleware
from campus_api.core.auth.provider import get_auth_provider
from campus_api.core.auth.rbac import AuthorizationGate
from campus_api.core.controller import EntityController
from campus_api.core.entities import ENTITY_TYPES
from campus_api.core.repositories import Repository, build_repositories
from campus_api.core.settings import Settings


def create_app(
    settings: Optional[Settings] = None,
    repositories: Optional[Dict[str, Repository]] = None,
    gate: Optional[AuthorizationGate] = None,
) -> FastAPI:
    """
    Compose the application.

    Every collaborator can be passed in; anything omitted is built from
    settings (which default to the CAMPUS_* environment).
    """
    settings = settings or Settings.from_env()
    logging.getLogger("campus").setLevel(settings.log_level)

    repos = dict(build_repositories(settings)) if repositories is None else dict(repositories)
    gate = gate or AuthorizationGate()
    provider = get_auth_provider(settings)

    app = FastAPI(
        title="Campus CRUD API",
        version=__version__,
    )
    app.state.settings = settings
    app.state.repositories = repos
    app.state.controllers = {}

    # ------------------------------------------------------------
    # Middleware stack (ORDER MATTERS)
    # Starlette reverses add_middleware order: the LAST call = OUTERMOST.
    # Runtime order (outermost -> innermost):
    #   SafeErrorMiddleware -> RequestContext -> Auth -> handler
    # ------------------------------------------------------------
    app.add_middleware(AuthMiddleware, provider=provider)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(SafeErrorMiddleware)

    install_error_handlers(app)

    for et in ENTITY_TYPES:
        if et.name not in repos:
            raise KeyError(f"No repository configured for {et.name}")
        controller = EntityController(et, repos[et.name], gate)
        app.state.controllers[et.name] = controller
        app.include_router(build_router(controller))

    app.include_router(health.router)
    app.include_router(metrics_export.router)

    return app


app = create_app()
