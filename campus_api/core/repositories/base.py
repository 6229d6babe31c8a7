"""Base repository interface."""

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar

from campus_api.core.entities import Entity, EntityType

E = TypeVar("E", bound=Entity)


class Repository(ABC, Generic[E]):
    """
    Per-entity data access.

    Abstracts the store (in-memory dict, SQLite table) behind four calls so
    controllers never see how rows are kept.
    """

    def __init__(self, entity_type: EntityType):
        self.entity_type = entity_type

    @abstractmethod
    def find_all(self) -> List[E]:
        """All entities, in a stable order; empty list if none."""

    @abstractmethod
    def find_by_id(self, key: Any) -> Optional[E]:
        """Entity with this key, or None. Never raises for absence."""

    @abstractmethod
    def save(self, entity: E) -> E:
        """Upsert by key and return the persisted value (with any assigned key)."""

    @abstractmethod
    def delete(self, entity: E) -> None:
        """Remove by identity. Callers check existence first."""

    def healthy(self) -> bool:
        return True
