from __future__ import annotations

from typing import Dict, Iterable

from campus_api.core.entities import ENTITY_TYPES, EntityType
from campus_api.core.settings import Settings

from .base import Repository
from .memory import InMemoryRepository
from .sqlite import SqliteRepository, SqliteStore


def build_repositories(
    settings: Settings,
    entity_types: Iterable[EntityType] = ENTITY_TYPES,
) -> Dict[str, Repository]:
    """
    One repository per entity type, keyed by entity name.
    The backing store is chosen by settings.store ("memory" or "sqlite").
    """
    if settings.store == "memory":
        return {et.name: InMemoryRepository(et) for et in entity_types}

    if settings.store == "sqlite":
        store = SqliteStore(settings.db_path)
        return {et.name: store.repository(et) for et in entity_types}

    raise ValueError(f"Unsupported store: {settings.store}")


__all__ = [
    "InMemoryRepository",
    "Repository",
    "SqliteRepository",
    "SqliteStore",
    "build_repositories",
]
