"""API dependencies for todo management."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from ..repositories.todo_repository import TodoRepository
from ..services.todo_views import TodoListView
from ..settings import get_settings
from ..storage import KeyValueStore, build_store


@lru_cache
def get_store() -> KeyValueStore:
    """The process-wide key-value store holding the persisted slot."""
    settings = get_settings()
    return build_store(settings.storage_backend, settings.storage_path)


def get_todo_repository(store: KeyValueStore = Depends(get_store)) -> TodoRepository:
    """Dependency for getting a repository bound to the configured slot."""
    return TodoRepository(store, key=get_settings().storage_key)


def get_todo_list_view(
    repository: TodoRepository = Depends(get_todo_repository),
) -> TodoListView:
    """Mount a fresh list view for the current request."""
    return TodoListView(repository)
