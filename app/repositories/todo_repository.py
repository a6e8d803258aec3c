"""Todo repository - persistence of the todo collection in a key-value slot."""

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from ..models.todo import Todo
from ..storage import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_SLOT_KEY = "todos"

_todo_list_adapter = TypeAdapter(List[Todo])


class DeserializationError(ValueError):
    """Raised when the persisted slot does not hold a valid todo collection."""


def serialize_todos(todos: List[Todo]) -> str:
    """Encode a collection as a JSON array of ``{id, text, completed}``."""
    return _todo_list_adapter.dump_json(todos).decode("utf-8")


def deserialize_todos(raw: str) -> List[Todo]:
    """Decode a JSON array produced by :func:`serialize_todos`."""
    try:
        return _todo_list_adapter.validate_json(raw)
    except ValidationError as exc:
        raise DeserializationError(f"Malformed todo collection: {exc}") from exc


class TodoRepository:
    """Reads and writes the whole todo collection under a single key."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_SLOT_KEY) -> None:
        self.store = store
        self.key = key

    def load(self) -> Optional[List[Todo]]:
        """Return the persisted collection, or ``None`` when the slot is empty."""
        raw = self.store.get(self.key)
        if raw is None:
            return None
        return deserialize_todos(raw)

    def save(self, todos: List[Todo], *, source: Optional[str] = None) -> None:
        """Overwrite the slot with the full collection."""
        self.store.set(self.key, serialize_todos(todos), source=source)
        logger.debug("Saved %d todos to slot %s", len(todos), self.key)

    def clear(self, *, source: Optional[str] = None) -> None:
        """Remove the slot entirely."""
        self.store.delete(self.key, source=source)
