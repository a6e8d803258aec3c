"""Key-value stores backing the persisted todo slot.

A store holds string values under string keys and notifies subscribers when
a key changes. As with the browser "storage" event, a listener is not told
about writes made under its own ``source``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Tuple, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageEvent:
    """A change of one key. ``new_value`` is ``None`` when the key was removed."""

    key: str
    old_value: Optional[str]
    new_value: Optional[str]
    source: Optional[str] = None


StorageListener = Callable[[StorageEvent], None]


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str, *, source: Optional[str] = None) -> None:
        ...

    def delete(self, key: str, *, source: Optional[str] = None) -> None:
        ...

    def subscribe(
        self, listener: StorageListener, *, source: Optional[str] = None
    ) -> Callable[[], None]:
        ...


class _ChangeNotifier:
    """Listener bookkeeping shared by the concrete stores."""

    def __init__(self) -> None:
        self._listeners: List[Tuple[StorageListener, Optional[str]]] = []
        self._listeners_lock = threading.Lock()

    def subscribe(
        self, listener: StorageListener, *, source: Optional[str] = None
    ) -> Callable[[], None]:
        entry = (listener, source)
        with self._listeners_lock:
            self._listeners.append(entry)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if entry in self._listeners:
                    self._listeners.remove(entry)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        with self._listeners_lock:
            return len(self._listeners)

    def _notify(self, event: StorageEvent) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener, listener_source in listeners:
            if event.source is not None and listener_source == event.source:
                continue
            try:
                listener(event)
            except Exception:
                logger.exception("Storage listener failed for key=%s", event.key)


class InMemoryKeyValueStore(_ChangeNotifier):
    """Dict-backed store living for the lifetime of the process."""

    def __init__(self) -> None:
        super().__init__()
        self._values: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str, *, source: Optional[str] = None) -> None:
        with self._lock:
            old_value = self._values.get(key)
            self._values[key] = value
        self._notify(StorageEvent(key, old_value, value, source))

    def delete(self, key: str, *, source: Optional[str] = None) -> None:
        with self._lock:
            if key not in self._values:
                return
            old_value = self._values.pop(key)
        self._notify(StorageEvent(key, old_value, None, source))

    def reset(self) -> None:
        """Drop every key without notifying (testing helper)."""
        with self._lock:
            self._values.clear()


class FileKeyValueStore(_ChangeNotifier):
    """Store persisted as one JSON object file of key to string value.

    The file is re-read on every ``get`` so writes from other processes are
    visible on the next load. Notifications only reach listeners in this
    process.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)
        self._lock = threading.Lock()

    @property
    def corrupt_path(self) -> Path:
        """Where an unreadable store file is moved before it is overwritten."""
        return self.path.with_name(f"{self.path.name}.corrupt")

    def _read_all(self, *, for_write: bool = False) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, dict):
            if for_write:
                os.replace(self.path, self.corrupt_path)
                logger.error(
                    "Storage file %s is unreadable; moved it to %s", self.path, self.corrupt_path
                )
            else:
                logger.error("Storage file %s is unreadable; reading it as empty", self.path)
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _write_all(self, values: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str, *, source: Optional[str] = None) -> None:
        with self._lock:
            values = self._read_all(for_write=True)
            old_value = values.get(key)
            values[key] = value
            self._write_all(values)
        self._notify(StorageEvent(key, old_value, value, source))

    def delete(self, key: str, *, source: Optional[str] = None) -> None:
        with self._lock:
            values = self._read_all(for_write=True)
            if key not in values:
                return
            old_value = values.pop(key)
            self._write_all(values)
        self._notify(StorageEvent(key, old_value, None, source))


def build_store(backend: str, path: Union[str, Path, None] = None) -> KeyValueStore:
    """Build a store for a configured backend name."""
    backend = backend.lower()
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "file":
        if path is None:
            raise ValueError("File storage backend requires a path")
        logger.info("Using file storage at %s", path)
        return FileKeyValueStore(path)
    raise ValueError(f"Unknown storage backend: {backend}")
