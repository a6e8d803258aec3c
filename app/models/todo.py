"""Todo data models using Pydantic."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints


class Todo(BaseModel):
    """A single task. Only ``completed`` changes after creation."""

    id: str
    text: str
    completed: bool

    model_config = ConfigDict(frozen=True, strict=True)


class TodoCreate(BaseModel):
    """Model for creating new todos. The length limit applies to trimmed text."""

    text: Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]


class TodoStats(BaseModel):
    """Aggregate counts derived from a todo collection."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    completion_rate: int = 0
