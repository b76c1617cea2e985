"""Review page snapshots and page identity helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from bs4 import BeautifulSoup, Tag

_REVIEW_PATH_RE = re.compile(r"^/[^/]+/[^/]+/pull/\d+(?:/.*)?$")


def is_review_page(url: str) -> bool:
    return bool(_REVIEW_PATH_RE.match(urlsplit(url).path))


def page_identity(url: str, prefix: str = "prharvest") -> str:
    """Scope key for persisted state: origin plus path, query and fragment dropped."""
    parts = urlsplit(url)
    origin = f"{parts.scheme}://{parts.netloc}" if parts.scheme else parts.netloc
    return f"{prefix}:{origin}{parts.path}"


def safe_text(element: Tag | None) -> str:
    if element is None:
        return ""
    return element.get_text().strip()


@dataclass(frozen=True)
class ReviewPage:
    url: str
    soup: BeautifulSoup

    @classmethod
    def from_html(cls, html: str, url: str, parser: str = "html.parser") -> ReviewPage:
        return cls(url=url, soup=BeautifulSoup(html, parser))

    @classmethod
    def from_file(cls, path: str | Path, url: str, parser: str = "html.parser") -> ReviewPage:
        return cls.from_html(Path(path).read_text(encoding="utf-8"), url, parser=parser)

    def identity(self, prefix: str = "prharvest") -> str:
        return page_identity(self.url, prefix)

    @property
    def is_review_page(self) -> bool:
        return is_review_page(self.url)


class FilePageSource:
    """Re-reads an HTML snapshot from disk on every extraction pass."""

    def __init__(self, path: str | Path, url: str, parser: str = "html.parser") -> None:
        self.path = Path(path)
        self.url = url
        self.parser = parser

    def __call__(self) -> ReviewPage:
        return ReviewPage.from_file(self.path, self.url, parser=self.parser)
