"""HTTP API for the todo app."""

from .routes import router

__all__ = ["router"]
