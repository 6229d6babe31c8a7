"""In-memory repository implementation."""

import threading
from typing import Any, Dict, List, Optional

from campus_api.core.entities import Entity, EntityType
from campus_api.core.repositories.base import Repository


class InMemoryRepository(Repository[Entity]):
    """
    Dict-backed store keyed by primary key.

    Iteration follows insertion order; surrogate keys come from a
    per-repository counter starting at 1.
    """

    def __init__(self, entity_type: EntityType):
        super().__init__(entity_type)
        self._rows: Dict[Any, Entity] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def find_all(self) -> List[Entity]:
        with self._lock:
            return [e.model_copy() for e in self._rows.values()]

    def find_by_id(self, key: Any) -> Optional[Entity]:
        with self._lock:
            e = self._rows.get(key)
            return e.model_copy() if e is not None else None

    def save(self, entity: Entity) -> Entity:
        et = self.entity_type
        with self._lock:
            key = et.key_of(entity)
            if key is None:
                if not et.surrogate:
                    raise ValueError(f"{et.name} requires a caller-supplied {et.key_param}")
                key = self._next_id
                entity = et.with_key(entity, key)
            if et.surrogate and key >= self._next_id:
                self._next_id = key + 1

            stored = entity.model_copy()
            self._rows[key] = stored
            return stored.model_copy()

    def delete(self, entity: Entity) -> None:
        with self._lock:
            self._rows.pop(self.entity_type.key_of(entity), None)
