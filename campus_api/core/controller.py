"""
Generic CRUD controller.

One EntityController per entity type. Every operation follows the same
shape: authorization gate first, then input binding, then a single
repository call (or an existence check followed by one). Absence is turned
into EntityNotFound here; the HTTP layer maps errors to responses.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from campus_api.core.auth.models import Principal
from campus_api.core.auth.rbac import READ, WRITE, AuthorizationGate
from campus_api.core.entities import Entity, EntityType
from campus_api.core.errors import EntityNotFound, ValidationFailure
from campus_api.core.observability.metrics import ENTITY_OPERATIONS_TOTAL
from campus_api.core.repositories.base import Repository

log = logging.getLogger("campus.controller")


def _describe_errors(e: ValidationError) -> ValidationFailure:
    fields: List[str] = []
    parts: List[str] = []
    for err in e.errors():
        name = ".".join(str(p) for p in err.get("loc", ())) or "body"
        fields.append(name)
        parts.append(f"{name}: {err.get('msg')}")
    return ValidationFailure("Invalid request: " + "; ".join(parts), fields=fields)


class EntityController:
    def __init__(self, entity_type: EntityType, repository: Repository, gate: AuthorizationGate):
        self.entity_type = entity_type
        self.repository = repository
        self.gate = gate

    @property
    def name(self) -> str:
        return self.entity_type.name

    def _authorize(self, principal: Optional[Principal], permission: str) -> Principal:
        return self.gate.check(principal, permission, resource=self.name)

    def _count(self, operation: str, outcome: str) -> None:
        ENTITY_OPERATIONS_TOTAL.labels(entity=self.name, operation=operation, outcome=outcome).inc()

    def _bind(self, data: Mapping[str, Any]) -> Entity:
        try:
            return self.entity_type.model.model_validate(dict(data))
        except ValidationError as e:
            raise _describe_errors(e) from e

    def _require(self, key: Any, operation: str) -> Entity:
        entity = self.repository.find_by_id(key)
        if entity is None:
            self._count(operation, "not_found")
            raise EntityNotFound(self.name, key)
        return entity

    # ------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------
    def list_all(self, principal: Optional[Principal]) -> List[Entity]:
        self._authorize(principal, READ)
        entities = self.repository.find_all()
        self._count("list", "ok")
        return entities

    def get(self, principal: Optional[Principal], raw_key: Any) -> Entity:
        self._authorize(principal, READ)
        key = self.entity_type.parse_key(raw_key)
        entity = self._require(key, "get")
        self._count("get", "ok")
        return entity

    def create(self, principal: Optional[Principal], params: Mapping[str, Any]) -> Entity:
        """
        Build a new entity from request parameters and save it.
        Surrogate keys are assigned by the repository, never by the caller.
        """
        p = self._authorize(principal, WRITE)
        et = self.entity_type

        data = dict(params)
        if et.surrogate:
            data.pop(et.key_param, None)
            data.pop(et.key_field, None)

        entity = self._bind(data)
        saved = self.repository.save(entity)
        self._count("create", "ok")
        log.info("created %s key=%s by=%s", self.name, et.key_of(saved), p.subject)
        return saved

    def update(self, principal: Optional[Principal], raw_key: Any, body: Any) -> Entity:
        """
        Full replacement of every mutable field. The stored key is kept even
        when the body carries a different one.
        """
        p = self._authorize(principal, WRITE)
        et = self.entity_type
        key = et.parse_key(raw_key)

        if not isinstance(body, Mapping):
            raise ValidationFailure("Request body must be a JSON object", fields=["body"])

        payload = {k: v for k, v in body.items() if k not in (et.key_param, et.key_field)}
        payload[et.key_param] = key
        replacement = self._bind(payload)

        existing = self._require(key, "update")
        updated = et.with_key(replacement, et.key_of(existing))
        saved = self.repository.save(updated)
        self._count("update", "ok")
        log.info("updated %s key=%s by=%s", self.name, key, p.subject)
        return saved

    def delete(self, principal: Optional[Principal], raw_key: Any) -> Dict[str, str]:
        p = self._authorize(principal, WRITE)
        key = self.entity_type.parse_key(raw_key)

        entity = self._require(key, "delete")
        self.repository.delete(entity)
        self._count("delete", "ok")
        log.info("deleted %s key=%s by=%s", self.name, key, p.subject)
        return {"message": f"{self.name} with id {key} deleted"}
