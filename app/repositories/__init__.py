"""Persistence layer for todos."""

from .todo_repository import (
    DeserializationError,
    TodoRepository,
    deserialize_todos,
    serialize_todos,
)

__all__ = [
    "DeserializationError",
    "TodoRepository",
    "deserialize_todos",
    "serialize_todos",
]
