from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple
import os


@dataclass(frozen=True)
class AppSettings:
    storage_backend: str
    storage_path: str
    storage_key: str
    allowed_origins: Tuple[str, ...]
    log_level: str


def parse_allowed_origins(raw_value: str) -> Tuple[str, ...]:
    return tuple(origin.strip() for origin in raw_value.split(",") if origin.strip())


@lru_cache
def get_settings() -> AppSettings:
    storage_backend = os.getenv("TODO_STORAGE_BACKEND", "memory").lower()
    storage_path = os.getenv("TODO_STORAGE_PATH", "data/todos.json")
    storage_key = os.getenv("TODO_STORAGE_KEY", "todos")
    allowed_origins = parse_allowed_origins(os.getenv("ALLOWED_ORIGINS", ""))
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    return AppSettings(
        storage_backend=storage_backend,
        storage_path=storage_path,
        storage_key=storage_key,
        allowed_origins=allowed_origins,
        log_level=log_level,
    )
