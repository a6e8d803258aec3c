"""FastAPI application for the todo list: JSON views, API and live stats."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.dependencies import get_store, get_todo_list_view, get_todo_repository
from .api.routes import router as api_router
from .logging_utils import (
    configure_logging,
    reset_request_id,
    reset_view_id,
    set_request_id,
    set_view_id,
)
from .models.todo import TodoStats
from .repositories.todo_repository import TodoRepository
from .services.todo_views import StatsView, TodoListView
from .settings import get_settings
from .storage import KeyValueStore

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

APP_DESCRIPTION = (
    "A simple todo application. Tasks are kept in a single persisted slot "
    "that every page reads on its own, and the statistics page follows "
    "changes made elsewhere."
)
APP_FEATURES: List[str] = [
    "Create and delete todos",
    "Mark tasks as completed",
    "View statistics and progress",
    "Persistent storage",
]

app = FastAPI(
    title="Todo App",
    description=APP_DESCRIPTION,
    version=__version__,
)

if settings.allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request_token = set_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        reset_request_id(request_token)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/")
def home(view: TodoListView = Depends(get_todo_list_view)) -> Dict[str, Any]:
    """Home page: the list itself and its completion summary."""
    return {
        "title": "My To-Do List",
        "todos": view.todos,
        "summary": view.summary(),
        "empty_message": None if view.todos else "No tasks yet. Add one above to get started!",
    }


@app.get("/stats")
def stats_page(view: TodoListView = Depends(get_todo_list_view)) -> Dict[str, Any]:
    """Statistics page as seen at mount time."""
    stats = view.stats()
    return {
        "title": "Todo Statistics",
        "stats": stats,
        "empty_message": (
            "No todos yet. Create some tasks to see statistics!" if stats.total == 0 else None
        ),
    }


@app.get("/about")
def about() -> Dict[str, Any]:
    return {
        "title": "About This App",
        "name": app.title,
        "version": __version__,
        "description": APP_DESCRIPTION,
        "features": APP_FEATURES,
    }


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok", "storage_backend": get_settings().storage_backend}


async def _forward_stats(websocket: WebSocket, updates: "asyncio.Queue[TodoStats]") -> None:
    while True:
        stats = await updates.get()
        await websocket.send_json(stats.model_dump())


def _log_forward_failure(task: "asyncio.Task[None]") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Stats forwarding failed: %s", exc, exc_info=exc)


@app.websocket("/ws/stats")
async def stats_websocket(
    websocket: WebSocket,
    store: KeyValueStore = Depends(get_store),
    repository: TodoRepository = Depends(get_todo_repository),
):
    """Push fresh statistics whenever the persisted slot changes."""
    view_id = uuid.uuid4().hex
    view_token = set_view_id(view_id)
    loop = asyncio.get_running_loop()
    updates: "asyncio.Queue[TodoStats]" = asyncio.Queue()
    view = StatsView(
        repository,
        store,
        source=view_id,
        on_change=lambda stats: loop.call_soon_threadsafe(updates.put_nowait, stats),
    )
    forwarder = None
    try:
        await websocket.accept()
        logger.info("Stats WebSocket connected")
        # Subscribe before the first send so no change is missed in between.
        await websocket.send_json(view.mount().model_dump())
        forwarder = asyncio.create_task(_forward_stats(websocket, updates))
        forwarder.add_done_callback(_log_forward_failure)
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        logger.info("Stats WebSocket disconnected")
    finally:
        view.unmount()
        if forwarder is not None:
            forwarder.cancel()
        reset_view_id(view_token)


app.include_router(api_router, prefix="/api")
