"""Pure operations over todo collections.

None of these functions mutate their input: each returns a new list (or a
derived value). Entries that an operation does not touch are passed through
as the same objects.
"""

from __future__ import annotations

import logging
import math
import uuid
from typing import List, Optional

from ..models.todo import Todo, TodoStats

logger = logging.getLogger(__name__)


class TodoValidationError(ValueError):
    """Raised when a todo would be created with blank text."""


def create_todo(text: Optional[str]) -> Todo:
    """Create a new, not yet completed todo with trimmed text."""
    if not text or not text.strip():
        raise TodoValidationError("Todo text cannot be empty")
    todo = Todo(id=str(uuid.uuid4()), text=text.strip(), completed=False)
    logger.debug("New todo: %s", todo.id)
    return todo


def toggle_todo(todos: List[Todo], todo_id: str) -> List[Todo]:
    """Flip ``completed`` on the todo with ``todo_id``; unknown ids are a no-op."""
    return [
        todo.model_copy(update={"completed": not todo.completed})
        if todo.id == todo_id
        else todo
        for todo in todos
    ]


def remove_todo(todos: List[Todo], todo_id: str) -> List[Todo]:
    """Drop the todo with ``todo_id``; unknown ids are a no-op."""
    return [todo for todo in todos if todo.id != todo_id]


def filter_by_completion(todos: List[Todo], want_completed: bool) -> List[Todo]:
    """Return the todos whose completion flag equals ``want_completed``."""
    return [todo for todo in todos if todo.completed == want_completed]


def get_completed_count(todos: List[Todo]) -> int:
    return sum(1 for todo in todos if todo.completed)


def get_total_count(todos: List[Todo]) -> int:
    return len(todos)


def compute_stats(todos: List[Todo]) -> TodoStats:
    """Compute totals and the completion percentage.

    The rate rounds half up (12.5 -> 13), not to the nearest even number.
    """
    total = get_total_count(todos)
    completed = get_completed_count(todos)
    completion_rate = math.floor(completed / total * 100 + 0.5) if total > 0 else 0
    return TodoStats(
        total=total,
        completed=completed,
        pending=total - completed,
        completion_rate=completion_rate,
    )
