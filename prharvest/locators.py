"""Context locators: file path, line range and mentioned code for one review thread.

Each locator walks a priority-ordered list of strategies over the thread
container and returns ``None`` (or an empty range) on a miss. Nothing here
raises on unexpected markup.
"""

from __future__ import annotations

import re

from bs4 import Tag

from prharvest.models import LineRange, ThreadContext
from prharvest.page import safe_text

_FILE_HEADER_LINK = "details-collapsible summary a"
_PATH_ATTR = "[data-path]"
_FILE_LINK_ANCHORS = "a.js-file-link, a.Link--primary, a.Link--secondary"
_PATHY_ATTRS = '[title*="/"], [aria-label*="/"]'

_LINE_HEADER = "details-collapsible details > div > div:first-child"
_LINE_NUMBER_ATTR = "[data-line-number]"
_LINE_NUMBER_CELLS = ".blob-num"
_LINE_ANCHORS = 'a[href*="#L"], a[href*="#R"]'

_CODE_TABLE = "details-collapsible > details-toggle > details > div > div.blob-wrapper.border-bottom > table"

_EXTENSION_RE = re.compile(r"\.\w+$")
_LINES_TEXT_RE = re.compile(r"\blines?\s+\+?(\d+)(?:\s*(?:-|–|—|to)\s*\+?(\d+))?", re.IGNORECASE)
_LEADING_INT_RE = re.compile(r"\s*\+?(\d+)")
_ANCHOR_LINE_RE = re.compile(r"#[LR](\d+)")


def _looks_like_path(text: str) -> bool:
    return "/" in text or bool(_EXTENSION_RE.search(text))


def _leading_int(raw: str | None) -> int | None:
    if not raw:
        return None
    match = _LEADING_INT_RE.match(raw)
    if not match:
        return None
    return int(match.group(1))


def find_file_path(thread: Tag) -> str | None:
    header_link = thread.select_one(_FILE_HEADER_LINK)
    header_text = safe_text(header_link)
    if header_text:
        return header_text

    for element in thread.select(_PATH_ATTR):
        value = (element.get("data-path") or "").strip()
        if value:
            return value

    for anchor in thread.select(_FILE_LINK_ANCHORS):
        candidate = safe_text(anchor)
        if candidate and _looks_like_path(candidate):
            return candidate

    for element in thread.select(_PATHY_ATTRS):
        text = safe_text(element)
        if "/" in text:
            return text
        for attr in ("title", "aria-label"):
            value = (element.get(attr) or "").strip()
            if "/" in value:
                return value
    return None


def parse_line_range_text(text: str) -> tuple[int, int] | None:
    """Parse "Lines 42-45" or "Comment on lines +67 to +87" style fragments."""
    match = _LINES_TEXT_RE.search(text)
    if not match:
        return None
    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else start
    return start, end


def _line_candidates(thread: Tag) -> set[int]:
    numbers: set[int] = set()

    header = thread.select_one(_LINE_HEADER)
    if header is not None:
        parsed = parse_line_range_text(safe_text(header))
        if parsed:
            numbers.update(parsed)

    for element in thread.select(_LINE_NUMBER_ATTR):
        value = _leading_int(element.get("data-line-number"))
        if value is not None:
            numbers.add(value)

    for cell in thread.select(_LINE_NUMBER_CELLS):
        value = _leading_int(safe_text(cell))
        if value is not None:
            numbers.add(value)

    for anchor in thread.select(_LINE_ANCHORS):
        match = _ANCHOR_LINE_RE.search(anchor.get("href") or "")
        if match:
            numbers.add(int(match.group(1)))

    return numbers


def find_line_range(thread: Tag) -> LineRange:
    # min/max rather than first/last: traversal order of the sources is not line order.
    numbers = _line_candidates(thread)
    if not numbers:
        return LineRange()
    return LineRange(line_start=min(numbers), line_end=max(numbers))


def find_code_mentioned(thread: Tag) -> str | None:
    table = thread.select_one(_CODE_TABLE)
    if table is None:
        return None
    code_lines = []
    for row in table.select("tr"):
        cell = row.select_one(".blob-code-inner")
        if cell is not None:
            code_lines.append(cell.get_text())
    if code_lines:
        return "\n".join(code_lines)
    return safe_text(table) or None


def locate_context(thread: Tag) -> ThreadContext:
    return ThreadContext(
        file_path=find_file_path(thread),
        lines=find_line_range(thread),
        code_mentioned=find_code_mentioned(thread),
    )
