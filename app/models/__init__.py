"""Data models for the todo app."""

from .todo import Todo, TodoCreate, TodoStats

__all__ = ["Todo", "TodoCreate", "TodoStats"]
