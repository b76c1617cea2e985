"""Typed command runtime dependency container."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from prharvest.clipboard import ClipboardWriter, CommandClipboard
from prharvest.storage import MemoryKeyValueStore, SQLiteKeyValueStore
from prharvest.storage.base import KeyValueBackend


@dataclass(frozen=True)
class CommandRuntime:
    storage_cls: Callable[[str | Path], KeyValueBackend] = SQLiteKeyValueStore
    memory_storage_cls: Callable[[], KeyValueBackend] = MemoryKeyValueStore
    clipboard_factory: Callable[[], ClipboardWriter] = CommandClipboard
    sleep: Callable[[float], None] = time.sleep
