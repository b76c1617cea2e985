"""Persistent per-page selection state: deselected and ignored suggestion ids."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence

from prharvest.models import Suggestion
from prharvest.storage.base import KeyValueBackend

logger = logging.getLogger(__name__)

DESELECTED_SUFFIX = "deselected"
IGNORED_SUFFIX = "ignored"


class SelectionStore:
    """Page-scoped persistence for the two id sets.

    Backend failures never propagate: reads degrade to an empty set and writes
    are dropped, so a broken store only costs remembering the selection.
    """

    def __init__(self, backend: KeyValueBackend, page_key: str) -> None:
        self.backend = backend
        self.page_key = page_key

    def _key(self, suffix: str) -> str:
        return f"{self.page_key}:{suffix}"

    def _load(self, suffix: str) -> set[str]:
        try:
            raw = self.backend.get(self._key(suffix))
            if not raw:
                return set()
            decoded = json.loads(raw)
        except Exception as exc:
            logger.warning("Could not read %s selection state for %s: %s", suffix, self.page_key, exc)
            return set()
        if not isinstance(decoded, list):
            return set()
        return {str(item) for item in decoded}

    def _save(self, suffix: str, ids: Iterable[str]) -> None:
        try:
            self.backend.set(self._key(suffix), json.dumps(sorted(set(ids))))
        except Exception as exc:
            logger.warning("Could not save %s selection state for %s: %s", suffix, self.page_key, exc)

    def get_deselected(self) -> set[str]:
        return self._load(DESELECTED_SUFFIX)

    def set_deselected(self, ids: Iterable[str]) -> None:
        self._save(DESELECTED_SUFFIX, ids)

    def get_ignored(self) -> set[str]:
        return self._load(IGNORED_SUFFIX)

    def set_ignored(self, ids: Iterable[str]) -> None:
        self._save(IGNORED_SUFFIX, ids)

    def reset(self) -> None:
        for suffix in (DESELECTED_SUFFIX, IGNORED_SUFFIX):
            try:
                self.backend.delete(self._key(suffix))
            except Exception as exc:
                logger.warning("Could not reset %s selection state for %s: %s", suffix, self.page_key, exc)


class SelectionState:
    """In-memory view of one page's selection, written through to its store."""

    def __init__(self, store: SelectionStore) -> None:
        self.store = store
        self.deselected: set[str] = store.get_deselected()
        self.ignored: set[str] = store.get_ignored()

    @property
    def page_key(self) -> str:
        return self.store.page_key

    def visible(self, suggestions: Sequence[Suggestion]) -> list[Suggestion]:
        return [item for item in suggestions if item.id not in self.ignored]

    def selected(self, suggestions: Sequence[Suggestion]) -> list[Suggestion]:
        return [item for item in self.visible(suggestions) if item.id not in self.deselected]

    def is_selected(self, suggestion_id: str) -> bool:
        return suggestion_id not in self.ignored and suggestion_id not in self.deselected

    def select(self, ids: Iterable[str]) -> None:
        self.deselected.difference_update(ids)
        self.store.set_deselected(self.deselected)

    def deselect(self, ids: Iterable[str]) -> None:
        self.deselected.update(ids)
        self.store.set_deselected(self.deselected)

    def set_selected(self, suggestion_id: str, selected: bool) -> None:
        if selected:
            self.select([suggestion_id])
        else:
            self.deselect([suggestion_id])

    def ignore(self, ids: Iterable[str]) -> None:
        self.ignored.update(ids)
        self.store.set_ignored(self.ignored)

    def unignore(self, ids: Iterable[str]) -> None:
        self.ignored.difference_update(ids)
        self.store.set_ignored(self.ignored)

    def toggle_all(self, suggestions: Sequence[Suggestion]) -> bool:
        """Select every visible suggestion, or deselect all if all were selected.

        Returns True when the visible suggestions end up selected.
        """
        visible_ids = [item.id for item in self.visible(suggestions)]
        all_selected = all(item_id not in self.deselected for item_id in visible_ids)
        if all_selected:
            self.deselect(visible_ids)
        else:
            self.select(visible_ids)
        return not all_selected

    def reset(self) -> None:
        self.deselected.clear()
        self.ignored.clear()
        self.store.reset()
