from typing import Any, Dict, List, Tuple

import pytest
from fastapi.testclient import TestClient

from campus_api.api.main import create_app
from campus_api.core.entities import ENTITY_TYPES
from campus_api.core.repositories import InMemoryRepository
from campus_api.core.settings import Settings

ADMIN_TOKEN = "test_admin_token"
USER_TOKEN = "test_user_token"


class SpyRepository(InMemoryRepository):
    """In-memory repository that records every call it receives."""

    def __init__(self, entity_type):
        super().__init__(entity_type)
        self.calls: List[Tuple[str, Any]] = []

    def find_all(self):
        self.calls.append(("find_all", None))
        return super().find_all()

    def find_by_id(self, key):
        self.calls.append(("find_by_id", key))
        return super().find_by_id(key)

    def save(self, entity):
        self.calls.append(("save", entity))
        return super().save(entity)

    def delete(self, entity):
        self.calls.append(("delete", entity))
        return super().delete(entity)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        env="dev",
        auth_mode="static_token",
        static_admin_token=ADMIN_TOKEN,
        static_user_token=USER_TOKEN,
        store="memory",
    )


@pytest.fixture()
def repos() -> Dict[str, SpyRepository]:
    return {et.name: SpyRepository(et) for et in ENTITY_TYPES}


@pytest.fixture()
def app(settings, repos):
    return create_app(settings=settings, repositories=repos)


@pytest.fixture()
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture()
def user_headers():
    return {"Authorization": f"Bearer {USER_TOKEN}"}


@pytest.fixture()
def client(app):
    """Logged-out client."""
    return TestClient(app)


@pytest.fixture()
def user_client(app, user_headers):
    return TestClient(app, headers=user_headers)


@pytest.fixture()
def admin_client(app, admin_headers):
    return TestClient(app, headers=admin_headers)
