"""Business logic for todos."""

from .todo_operations import (
    TodoValidationError,
    compute_stats,
    create_todo,
    filter_by_completion,
    get_completed_count,
    get_total_count,
    remove_todo,
    toggle_todo,
)
from .todo_views import StatsView, TodoListView, load_todos

__all__ = [
    "StatsView",
    "TodoListView",
    "TodoValidationError",
    "compute_stats",
    "create_todo",
    "filter_by_completion",
    "get_completed_count",
    "get_total_count",
    "load_todos",
    "remove_todo",
    "toggle_todo",
]
