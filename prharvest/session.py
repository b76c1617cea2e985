"""Stateful review session: extraction results, selection and output building.

A session owns the latest extraction pass for one page source plus the
selection state for that page's identity. It is driven from a single thread;
re-extraction is either immediate (``refresh``) or coalesced through the
debouncers (``request_refresh`` / ``notify_change`` followed by ``poll``).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from typing import cast

from prharvest.builders import build_json, build_markdown, build_output, build_prompt
from prharvest.clipboard import ClipboardError, ClipboardWriter
from prharvest.config import HarvestConfig
from prharvest.models import OutputFormat, QueryResult, Suggestion
from prharvest.page import ReviewPage, is_review_page
from prharvest.pipeline import HarvestEngine
from prharvest.selection import SelectionState, SelectionStore
from prharvest.storage.base import KeyValueBackend
from prharvest.watcher import ChangeNotification, Debouncer, is_relevant_change

logger = logging.getLogger(__name__)

EMPTY_STATE_MESSAGE = "No suggestions found. Try refreshing or expanding more review threads."
NOTHING_SELECTED_MESSAGE = "No suggestions selected to copy"

PageSource = Callable[[], ReviewPage]


class ReviewSession:
    def __init__(
        self,
        page_source: PageSource,
        backend: KeyValueBackend,
        engine: HarvestEngine | None = None,
        config: HarvestConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or (engine.config if engine else HarvestConfig())
        self.engine = engine or HarvestEngine(config=self.config)
        self.page_source = page_source
        self.backend = backend
        self.suggestions: list[Suggestion] = []
        self.page_url = ""
        self.selection: SelectionState | None = None
        self.status = ""
        self._refresh_debouncer = Debouncer(self.refresh, self.config.watch.settle_seconds, clock=clock)
        self._change_debouncer = Debouncer(self.request_refresh, self.config.watch.notification_settle_seconds, clock=clock)

    def _selection_for(self, page: ReviewPage) -> SelectionState:
        key = page.identity(self.config.state.key_prefix)
        if self.selection is None or self.selection.page_key != key:
            logger.debug("Loading selection state for %s", key)
            self.selection = SelectionState(SelectionStore(self.backend, key))
        return self.selection

    @property
    def state(self) -> SelectionState:
        if self.selection is None:
            self.refresh()
        return cast(SelectionState, self.selection)

    def refresh(self) -> list[Suggestion]:
        page = self.page_source()
        self._selection_for(page)
        self.page_url = page.url
        self.suggestions = self.engine.extract_all(page)
        self.status = f"Found {len(self.suggestions)} suggestion(s)"
        return self.suggestions

    def request_refresh(self) -> None:
        self._refresh_debouncer.trigger()

    def notify_change(self, notification: ChangeNotification) -> bool:
        extraction = self.config.extraction
        if not is_relevant_change(notification, extraction.thread_selector, extraction.html_parser):
            return False
        self._change_debouncer.trigger()
        return True

    def poll(self) -> bool:
        """Advance both debouncers; returns True when an extraction ran."""
        self._change_debouncer.poll()
        return self._refresh_debouncer.poll()

    @property
    def pending(self) -> bool:
        return self._change_debouncer.pending or self._refresh_debouncer.pending

    def visible(self) -> list[Suggestion]:
        return self.state.visible(self.suggestions)

    def selected(self) -> list[Suggestion]:
        return self.state.selected(self.suggestions)

    def query(self) -> QueryResult:
        visible = self.visible()
        selected_ids = [item.id for item in visible if self.state.is_selected(item.id)]
        return QueryResult(
            found=len(visible),
            selected=len(selected_ids),
            suggestions=visible,
            selected_ids=selected_ids,
            is_review_page=is_review_page(self.page_url),
        )

    def empty_message(self) -> str | None:
        return EMPTY_STATE_MESSAGE if not self.visible() else None

    def _items_for(self, ids: Iterable[str]) -> list[Suggestion]:
        wanted = set(ids)
        return [item for item in self.suggestions if item.id in wanted]

    def build_prompt(self, ids: Iterable[str]) -> str:
        return build_prompt(self._items_for(ids), self.page_url, reviewer_label=self.config.reviewer.display_name)

    def build_markdown(self, ids: Iterable[str]) -> str:
        return build_markdown(self._items_for(ids), self.page_url)

    def build_json(self, ids: Iterable[str]) -> str:
        return build_json(self._items_for(ids), self.page_url)

    def build(self, fmt: OutputFormat | str, ids: Iterable[str] | None = None) -> str:
        items = self.selected() if ids is None else self._items_for(ids)
        return build_output(fmt, items, self.page_url, reviewer_label=self.config.reviewer.display_name)

    def copy_selected(self, fmt: OutputFormat | str, clipboard: ClipboardWriter) -> str:
        selected = self.selected()
        if not selected:
            self.status = NOTHING_SELECTED_MESSAGE
            return self.status
        text = build_output(fmt, selected, self.page_url, reviewer_label=self.config.reviewer.display_name)
        try:
            clipboard.write_text(text)
        except ClipboardError as exc:
            logger.warning("Clipboard write failed: %s", exc)
            self.status = f"Copy failed: {str(exc) or 'unknown error'}"
            return self.status
        self.status = f"Copied {len(selected)} suggestion(s) to clipboard"
        return self.status

    def select(self, ids: Iterable[str]) -> None:
        self.state.select(ids)

    def deselect(self, ids: Iterable[str]) -> None:
        self.state.deselect(ids)

    def ignore(self, ids: Iterable[str]) -> None:
        self.state.ignore(ids)

    def unignore(self, ids: Iterable[str]) -> None:
        self.state.unignore(ids)

    def toggle_all(self) -> bool:
        return self.state.toggle_all(self.suggestions)
