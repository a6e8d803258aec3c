#!/usr/bin/env python3
"""
Launch utility for the todo app.
Supports several run modes.
"""

import os
import sys
import logging
from pathlib import Path

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def get_port() -> int:
    """Return the port the server should bind to."""
    return int(os.getenv("PORT", "8080"))


def get_workers() -> int:
    """Return the number of workers to use for production server."""
    raw_value = os.getenv("WEB_CONCURRENCY", "1")
    try:
        workers = int(raw_value)
    except ValueError:
        logger.warning("Invalid WEB_CONCURRENCY value '%s'; defaulting to 1", raw_value)
        workers = 1
    return max(1, workers)


def log_startup(port: int, workers: int) -> None:
    """Log a single startup line for process managers."""
    backend = os.getenv("TODO_STORAGE_BACKEND", "memory")
    logger.info(
        "Starting on 0.0.0.0:%s (TODO_STORAGE_BACKEND=%s, WORKERS=%s)",
        port,
        backend,
        workers,
    )
    if workers > 1 and backend == "memory":
        logger.warning("In-memory storage is not shared between workers; use TODO_STORAGE_BACKEND=file")


def run_development():
    """Development mode with auto-reload."""
    import uvicorn

    logger.info("Running in development mode...")
    Path("data").mkdir(exist_ok=True)
    port = get_port()
    log_startup(port, 1)
    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",
        port=port,
        reload=True,
        log_level="debug",
    )


def run_production():
    """Production mode."""
    import uvicorn

    port = get_port()
    workers = get_workers()
    log_startup(port, workers)
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=port,
        workers=workers,
        log_level="info"
    )


def show_help():
    """Show usage."""
    print("""
Todo App - Launch Utility

Usage:
  todo-app [command]

Commands:
  dev        - Run in development mode (auto-reload)
  prod       - Run in production mode
  help       - Show this help message

Environment:
  PORT                  Port to bind (default 8080)
  WEB_CONCURRENCY       Worker processes in prod mode (default 1)
  TODO_STORAGE_BACKEND  memory | file (default memory)
  TODO_STORAGE_PATH     File for the file backend (default data/todos.json)
    """.strip())


def main(argv=None):
    """Entry point."""
    argv = sys.argv[1:] if argv is None else argv
    mode = argv[0].lower() if argv else "prod"

    try:
        if mode == "dev":
            run_development()
        elif mode == "prod":
            run_production()
        elif mode in ["help", "-h", "--help"]:
            show_help()
        else:
            print(f"Unknown mode: {mode}")
            show_help()
            sys.exit(1)

    except KeyboardInterrupt:
        logger.info("Shutdown requested...")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
