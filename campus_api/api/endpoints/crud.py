"""HTTP surface for an EntityController: /all, get, /post, put, delete."""

from __future__ import annotations

import json
from typing import Any, Optional

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from campus_api.core.auth.models import Principal
from campus_api.core.controller import EntityController


def _principal(request: Request) -> Optional[Principal]:
    return getattr(request.state, "principal", None)


def _decode_json(raw: bytes) -> Any:
    # Malformed bodies become None; the controller rejects them after the
    # authorization check so a forbidden caller still sees 403.
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def build_router(controller: EntityController) -> APIRouter:
    et = controller.entity_type
    router = APIRouter(prefix=f"/api{et.prefix}", tags=[et.tag])

    @router.get("/all", summary=f"List {et.name}")
    async def list_all(request: Request):
        entities = await run_in_threadpool(controller.list_all, _principal(request))
        return [e.to_json() for e in entities]

    @router.get("", summary=f"Get a single {et.name}")
    async def get_one(request: Request):
        key = request.query_params.get(et.key_param)
        entity = await run_in_threadpool(controller.get, _principal(request), key)
        return entity.to_json()

    @router.post("/post", summary=f"Create a {et.name}")
    async def create(request: Request):
        params = dict(request.query_params)
        entity = await run_in_threadpool(controller.create, _principal(request), params)
        return entity.to_json()

    @router.put("", summary=f"Update a single {et.name}")
    async def update(request: Request):
        key = request.query_params.get(et.key_param)
        body = _decode_json(await request.body())
        entity = await run_in_threadpool(controller.update, _principal(request), key, body)
        return entity.to_json()

    @router.delete("", summary=f"Delete a {et.name}")
    async def delete(request: Request):
        key = request.query_params.get(et.key_param)
        return await run_in_threadpool(controller.delete, _principal(request), key)

    return router
