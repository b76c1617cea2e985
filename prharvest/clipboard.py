"""Clipboard writers used at the output edge."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from typing import Protocol


class ClipboardError(RuntimeError):
    pass


class ClipboardWriter(Protocol):
    def write_text(self, text: str) -> None: ...


DEFAULT_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("pbcopy",),
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("clip",),
)


class CommandClipboard:
    """Pipes text into the first clipboard command found on PATH."""

    def __init__(self, commands: Sequence[Sequence[str]] = DEFAULT_COMMANDS, timeout_seconds: float = 5.0) -> None:
        self.commands = [tuple(cmd) for cmd in commands]
        self.timeout_seconds = timeout_seconds

    def _resolve(self) -> tuple[str, ...]:
        for cmd in self.commands:
            if cmd and shutil.which(cmd[0]):
                return cmd
        raise ClipboardError("no clipboard command available (tried: " + ", ".join(cmd[0] for cmd in self.commands if cmd) + ")")

    def write_text(self, text: str) -> None:
        cmd = self._resolve()
        try:
            proc = subprocess.run(
                list(cmd),
                input=text,
                text=True,
                capture_output=True,
                check=False,
                timeout=self.timeout_seconds,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise ClipboardError(f"{cmd[0]} failed: {exc}") from exc
        if proc.returncode != 0:
            raise ClipboardError(f"{cmd[0]} exited with {proc.returncode}: {proc.stderr.strip()}")


class MemoryClipboard:
    def __init__(self) -> None:
        self.contents: list[str] = []

    def write_text(self, text: str) -> None:
        self.contents.append(text)
