"""Key-value store tests."""

import json

import pytest

from app.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    StorageEvent,
    build_store,
)


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return FileKeyValueStore(tmp_path / "store.json")


class TestKeyValueStore:
    def test_get_missing_key(self, any_store):
        assert any_store.get("todos") is None

    def test_set_and_get(self, any_store):
        any_store.set("todos", "[]")
        assert any_store.get("todos") == "[]"

    def test_delete(self, any_store):
        any_store.set("todos", "[]")
        any_store.delete("todos")
        assert any_store.get("todos") is None

    def test_delete_missing_key_does_not_notify(self, any_store):
        events = []
        any_store.subscribe(events.append)
        any_store.delete("todos")
        assert events == []

    def test_listener_receives_change(self, any_store):
        events = []
        any_store.subscribe(events.append)
        any_store.set("todos", "[1]")
        any_store.set("todos", "[2]")

        assert events == [
            StorageEvent("todos", None, "[1]", None),
            StorageEvent("todos", "[1]", "[2]", None),
        ]

    def test_delete_notifies_with_none(self, any_store):
        any_store.set("todos", "[]")
        events = []
        any_store.subscribe(events.append)
        any_store.delete("todos", source="writer")
        assert events == [StorageEvent("todos", "[]", None, "writer")]

    def test_own_writes_are_not_reported(self, any_store):
        own, other = [], []
        any_store.subscribe(own.append, source="view-a")
        any_store.subscribe(other.append, source="view-b")

        any_store.set("todos", "[]", source="view-a")

        assert own == []
        assert len(other) == 1

    def test_unsubscribe(self, any_store):
        events = []
        unsubscribe = any_store.subscribe(events.append)
        unsubscribe()
        unsubscribe()
        any_store.set("todos", "[]")
        assert events == []
        assert any_store.listener_count == 0

    def test_failing_listener_does_not_break_others(self, any_store, caplog):
        def broken(event):
            raise RuntimeError("boom")

        events = []
        any_store.subscribe(broken)
        any_store.subscribe(events.append)

        any_store.set("todos", "[]")

        assert len(events) == 1
        assert any_store.get("todos") == "[]"
        assert "Storage listener failed" in caplog.text


class TestFileKeyValueStore:
    def test_values_survive_new_instance(self, tmp_path):
        path = tmp_path / "store.json"
        FileKeyValueStore(path).set("todos", "[]")
        assert FileKeyValueStore(path).get("todos") == "[]"

    def test_file_layout(self, tmp_path):
        path = tmp_path / "store.json"
        store = FileKeyValueStore(path)
        store.set("todos", "[]")
        store.set("other", "x")
        assert json.loads(path.read_text(encoding="utf-8")) == {"todos": "[]", "other": "x"}

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "store.json"
        FileKeyValueStore(path).set("todos", "[]")
        assert path.exists()

    def test_no_temp_files_left_behind(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "store.json")
        store.set("todos", "[]")
        store.set("todos", "[1]")
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_corrupt_file_reads_as_empty(self, tmp_path, caplog):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        store = FileKeyValueStore(path)

        assert store.get("todos") is None
        assert path.read_text(encoding="utf-8") == "{not json"
        assert "is unreadable" in caplog.text

    def test_corrupt_file_is_moved_aside_before_write(self, tmp_path, caplog):
        path = tmp_path / "store.json"
        path.write_text('{"other": "x"', encoding="utf-8")
        store = FileKeyValueStore(path)

        store.set("todos", "[]")

        assert store.get("todos") == "[]"
        assert store.corrupt_path.read_text(encoding="utf-8") == '{"other": "x"'
        assert any(
            record.levelname == "ERROR" and "moved it to" in record.getMessage()
            for record in caplog.records
        )

    def test_non_object_file_is_moved_aside_on_delete(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        store = FileKeyValueStore(path)

        store.delete("todos")

        assert not path.exists()
        assert store.corrupt_path.read_text(encoding="utf-8") == "[1, 2]"

    def test_sees_writes_from_other_instances(self, tmp_path):
        path = tmp_path / "store.json"
        reader = FileKeyValueStore(path)
        FileKeyValueStore(path).set("todos", "[]")
        assert reader.get("todos") == "[]"


class TestBuildStore:
    def test_memory_backend(self):
        assert isinstance(build_store("memory"), InMemoryKeyValueStore)

    def test_file_backend(self, tmp_path):
        store = build_store("FILE", tmp_path / "store.json")
        assert isinstance(store, FileKeyValueStore)

    def test_file_backend_requires_path(self):
        with pytest.raises(ValueError):
            build_store("file")

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown storage backend"):
            build_store("redis")
