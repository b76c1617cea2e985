from pathlib import Path

from prharvest.models import Suggestion
from prharvest.selection import SelectionState, SelectionStore
from prharvest.storage import MemoryKeyValueStore, SQLiteKeyValueStore

PAGE_KEY = "prharvest:https://github.com/acme/app/pull/7/files"


def _items(*ids: str) -> list[Suggestion]:
    return [Suggestion(id=sid, text=sid, summary=sid, source_url="https://github.com/acme/app/pull/7") for sid in ids]


class _BrokenBackend:
    def get(self, key: str) -> str | None:
        raise OSError("disk unavailable")

    def set(self, key: str, value: str) -> None:
        raise OSError("disk unavailable")

    def delete(self, key: str) -> None:
        raise OSError("disk unavailable")


def test_sqlite_store_round_trip(tmp_path: Path) -> None:
    store = SQLiteKeyValueStore(tmp_path / "nested" / "state.db")
    assert store.get("missing") is None
    store.set("k", "v1")
    store.set("k", "v2")
    assert store.get("k") == "v2"
    store.delete("k")
    assert store.get("k") is None


def test_selection_persists_across_instances(tmp_path: Path) -> None:
    db_path = tmp_path / "state.db"
    state = SelectionState(SelectionStore(SQLiteKeyValueStore(db_path), PAGE_KEY))
    state.deselect(["a"])
    state.ignore(["c"])

    reloaded = SelectionState(SelectionStore(SQLiteKeyValueStore(db_path), PAGE_KEY))
    assert reloaded.deselected == {"a"}
    assert reloaded.ignored == {"c"}
    assert [item.id for item in reloaded.selected(_items("a", "b", "c"))] == ["b"]


def test_selection_is_scoped_to_page_identity() -> None:
    backend = MemoryKeyValueStore()
    SelectionState(SelectionStore(backend, PAGE_KEY)).deselect(["a"])

    other = SelectionState(SelectionStore(backend, "prharvest:https://github.com/acme/app/pull/8/files"))
    assert other.deselected == set()
    assert other.is_selected("a")


def test_new_suggestions_default_to_selected() -> None:
    state = SelectionState(SelectionStore(MemoryKeyValueStore(), PAGE_KEY))
    items = _items("a", "b")
    assert state.selected(items) == items


def test_ignored_items_are_hidden_and_not_selected() -> None:
    state = SelectionState(SelectionStore(MemoryKeyValueStore(), PAGE_KEY))
    state.ignore(["b"])
    items = _items("a", "b")
    assert [item.id for item in state.visible(items)] == ["a"]
    assert not state.is_selected("b")

    state.unignore(["b"])
    assert state.is_selected("b")


def test_set_selected_and_reset() -> None:
    backend = MemoryKeyValueStore()
    state = SelectionState(SelectionStore(backend, PAGE_KEY))
    state.set_selected("a", False)
    assert not state.is_selected("a")
    state.set_selected("a", True)
    assert state.is_selected("a")

    state.deselect(["a"])
    state.ignore(["b"])
    state.reset()
    assert state.deselected == set()
    assert backend.get(f"{PAGE_KEY}:deselected") is None
    assert backend.get(f"{PAGE_KEY}:ignored") is None


def test_toggle_all_flips_between_all_and_none() -> None:
    state = SelectionState(SelectionStore(MemoryKeyValueStore(), PAGE_KEY))
    items = _items("a", "b", "c")
    state.ignore(["c"])

    assert state.toggle_all(items) is False
    assert state.selected(items) == []

    assert state.toggle_all(items) is True
    assert [item.id for item in state.selected(items)] == ["a", "b"]

    state.deselect(["a"])
    assert state.toggle_all(items) is True
    assert [item.id for item in state.selected(items)] == ["a", "b"]


def test_backend_failures_are_tolerated(caplog) -> None:
    state = SelectionState(SelectionStore(_BrokenBackend(), PAGE_KEY))
    assert state.deselected == set()

    state.deselect(["a"])
    state.reset()

    assert state.deselected == set()
    assert "Could not save deselected selection state" in caplog.text


def test_corrupt_stored_value_reads_as_empty() -> None:
    backend = MemoryKeyValueStore({f"{PAGE_KEY}:deselected": "{not json", f"{PAGE_KEY}:ignored": '{"a": 1}'})
    store = SelectionStore(backend, PAGE_KEY)
    assert store.get_deselected() == set()
    assert store.get_ignored() == set()
