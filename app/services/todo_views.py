"""Views over the persisted todo collection.

Every view loads its own snapshot when it mounts; nothing is shared between
views except the key-value store. A view that has to follow changes made by
others subscribes to the store and reloads on each notification. Writes are
last-writer-wins: two views saving at the same time can lose an update.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, List, Optional

from ..models.todo import Todo, TodoStats
from ..repositories.todo_repository import DeserializationError, TodoRepository
from ..storage import KeyValueStore, StorageEvent
from .todo_operations import (
    compute_stats,
    create_todo,
    filter_by_completion,
    get_completed_count,
    get_total_count,
    remove_todo,
    toggle_todo,
)

logger = logging.getLogger(__name__)


def load_todos(repository: TodoRepository) -> List[Todo]:
    """Load the collection, treating a missing or malformed slot as empty."""
    try:
        todos = repository.load()
    except DeserializationError as exc:
        logger.warning("Ignoring malformed todo slot %s: %s", repository.key, exc)
        return []
    return todos or []


class TodoListView:
    """The primary editing view: every mutation is saved immediately."""

    def __init__(self, repository: TodoRepository, source: Optional[str] = None) -> None:
        self.repository = repository
        self.source = source or uuid.uuid4().hex
        self.todos: List[Todo] = load_todos(repository)

    def _commit(self, todos: List[Todo]) -> List[Todo]:
        self.todos = todos
        self.repository.save(todos, source=self.source)
        return todos

    def add(self, text: Optional[str]) -> Todo:
        """Append a new todo. Blank text raises and leaves the view untouched."""
        todo = create_todo(text)
        self._commit([*self.todos, todo])
        logger.info("Created todo %s", todo.id)
        return todo

    def _has(self, todo_id: str) -> bool:
        return any(todo.id == todo_id for todo in self.todos)

    def toggle(self, todo_id: str) -> List[Todo]:
        """Flip a todo. Unknown ids leave the slot untouched."""
        if not self._has(todo_id):
            return list(self.todos)
        return self._commit(toggle_todo(self.todos, todo_id))

    def delete(self, todo_id: str) -> List[Todo]:
        """Delete a todo. Unknown ids leave the slot untouched."""
        if not self._has(todo_id):
            return list(self.todos)
        todos = self._commit(remove_todo(self.todos, todo_id))
        logger.info("Deleted todo %s", todo_id)
        return todos

    def clear(self) -> None:
        self.todos = []
        self.repository.clear(source=self.source)

    def filter(self, completed: Optional[bool] = None) -> List[Todo]:
        if completed is None:
            return list(self.todos)
        return filter_by_completion(self.todos, completed)

    def stats(self) -> TodoStats:
        return compute_stats(self.todos)

    def summary(self) -> Optional[str]:
        """Return "X of Y tasks completed", or ``None`` for an empty list."""
        total = get_total_count(self.todos)
        if total == 0:
            return None
        return f"{get_completed_count(self.todos)} of {total} tasks completed"


class StatsView:
    """Read-only statistics that follow changes made by other views."""

    def __init__(
        self,
        repository: TodoRepository,
        store: KeyValueStore,
        source: Optional[str] = None,
        on_change: Optional[Callable[[TodoStats], None]] = None,
    ) -> None:
        self.repository = repository
        self.store = store
        self.source = source or uuid.uuid4().hex
        self.on_change = on_change
        self.todos: List[Todo] = []
        self.stats = TodoStats()
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def mount(self) -> TodoStats:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._handle_change, source=self.source)
        return self.refresh()

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def refresh(self) -> TodoStats:
        self.todos = load_todos(self.repository)
        self.stats = compute_stats(self.todos)
        return self.stats

    def _handle_change(self, event: StorageEvent) -> None:
        if event.key != self.repository.key:
            return
        stats = self.refresh()
        if self.on_change is not None:
            self.on_change(stats)

    def __enter__(self) -> "StatsView":
        self.mount()
        return self

    def __exit__(self, *exc_info) -> None:
        self.unmount()
