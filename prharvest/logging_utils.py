"""Logging configuration helpers."""

from __future__ import annotations

import logging
from typing import TextIO

_NOISY_LOGGERS = ("uvicorn.access",)


def configure_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    normalized = level.upper()
    resolved = getattr(logging, normalized, logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=stream,
    )
    if resolved > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
