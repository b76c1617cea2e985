"""Storage backend interfaces for persisted selection state."""

from __future__ import annotations

from typing import Protocol


class KeyValueBackend(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...
