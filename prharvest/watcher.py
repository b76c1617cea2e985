"""Change notifications and single-threaded debounced recomputation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_COMMENT_SHAPES = ".js-comment, article"


@dataclass(frozen=True)
class ChangeNotification:
    added_markup: list[str] = field(default_factory=list)
    navigation: bool = False


def is_relevant_change(notification: ChangeNotification, thread_selector: str, parser: str = "html.parser") -> bool:
    """True for navigations and for insertions shaped like threads or comments."""
    if notification.navigation:
        return True
    selector = f"{thread_selector}, {_COMMENT_SHAPES}"
    for fragment in notification.added_markup:
        if not fragment.strip():
            continue
        if BeautifulSoup(fragment, parser).select_one(selector) is not None:
            return True
    return False


class Debouncer:
    """Coalesces triggers inside a settle window into one callback run.

    Nothing runs in the background: the owner calls ``poll()`` from its loop
    and the callback executes synchronously there, so runs never overlap.
    """

    def __init__(
        self,
        callback: Callable[[], object],
        settle_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.callback = callback
        self.settle_seconds = settle_seconds
        self.clock = clock
        self._deadline: float | None = None
        self.runs = 0

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def trigger(self) -> None:
        self._deadline = self.clock() + self.settle_seconds

    def poll(self) -> bool:
        if self._deadline is None or self.clock() < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        if self._deadline is None:
            return False
        self._deadline = None
        self.runs += 1
        self.callback()
        return True


class FileChangeFeed:
    """Turns modifications of a snapshot file into change notifications."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._signature = self._stat()

    def _stat(self) -> tuple[int, int] | None:
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            return None
        return stat.st_mtime_ns, stat.st_size

    def poll(self) -> ChangeNotification | None:
        signature = self._stat()
        if signature == self._signature:
            return None
        self._signature = signature
        if signature is None:
            logger.debug("Snapshot %s disappeared", self.path)
            return None
        # A rewritten snapshot is a full reload of the page.
        return ChangeNotification(navigation=True)
