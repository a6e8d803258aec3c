"""Test configuration for the todo app."""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.api.dependencies import get_store  # noqa: E402
from app.main import app  # noqa: E402
from app.repositories.todo_repository import TodoRepository  # noqa: E402
from app.storage import InMemoryKeyValueStore  # noqa: E402


@pytest.fixture(autouse=True)
def reset_store():
    """Reset the shared store for each test."""
    store = get_store()
    store.reset()
    yield
    store.reset()


@pytest.fixture
def client() -> TestClient:
    """Provide a FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    """A private store, independent from the app's."""
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store: InMemoryKeyValueStore) -> TodoRepository:
    return TodoRepository(store)
