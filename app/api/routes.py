"""API routes for todo management."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..models.todo import Todo, TodoCreate, TodoStats
from ..services.todo_operations import TodoValidationError
from ..services.todo_views import TodoListView
from .dependencies import get_todo_list_view

router = APIRouter()


@router.get("/todos", response_model=List[Todo])
def get_todos(
    completed: Optional[bool] = Query(None, description="Only todos with this completion state"),
    view: TodoListView = Depends(get_todo_list_view),
) -> List[Todo]:
    """Get all todo items, optionally filtered by completion."""
    return view.filter(completed)


@router.post("/todos", response_model=Todo, status_code=status.HTTP_201_CREATED)
def create_todo(
    todo_data: TodoCreate,
    view: TodoListView = Depends(get_todo_list_view),
) -> Todo:
    """Create a new todo item."""
    try:
        return view.add(todo_data.text)
    except TodoValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/todos/{todo_id}/toggle", response_model=List[Todo])
def toggle_todo(
    todo_id: str,
    view: TodoListView = Depends(get_todo_list_view),
) -> List[Todo]:
    """Flip the completion state of a todo and return the whole collection."""
    return view.toggle(todo_id)


@router.delete("/todos/{todo_id}", response_model=List[Todo])
def delete_todo(
    todo_id: str,
    view: TodoListView = Depends(get_todo_list_view),
) -> List[Todo]:
    """Delete a todo item and return the remaining collection."""
    return view.delete(todo_id)


@router.delete("/todos", status_code=status.HTTP_204_NO_CONTENT)
def clear_todos(view: TodoListView = Depends(get_todo_list_view)) -> Response:
    """Remove every todo item."""
    view.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stats", response_model=TodoStats)
def get_stats(view: TodoListView = Depends(get_todo_list_view)) -> TodoStats:
    """Get completion statistics for the current collection."""
    return view.stats()
