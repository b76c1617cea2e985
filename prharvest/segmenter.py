"""Split one review comment into discrete suggestion strings.

Structured strategies run unconditionally and their results are concatenated
in this order: list items, pattern lines, suggested-change blocks. Only when
all three come back empty does the plain-text fallback apply, since most
automated review comments are unstructured prose.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable

from bs4 import Tag

from prharvest.page import safe_text

COMMENT_BODY = ".js-comment-body, .comment-body"
_TASK_LIST_BODY = "div:nth-child(2) > div.edit-comment-hide > task-lists"

_LIST_ITEMS = "ul li, ol li"
_PATTERN_LINE_RE = re.compile(
    r"^(-|\*|\d+\.)\s+(.+)$|^(suggestion|fix|improve|change|refactor|rename|remove|add|update)[:\-]\s*(.+)$",
    re.IGNORECASE,
)
_QUOTE_TRIM_RE = re.compile(r"""^["'\s]+|["'\s]+$""")

_SUGGESTED_CHANGE_TABLES = ".js-suggested-changes-blob table, .js-suggested-changes-blob .d-table"
_DELETION_MARKERS = ".blob-num-deletion, .blob-code-deletion, .js-blob-code-deletion, .blob-code-marker-deletion"
_ADDITION_MARKERS = ".blob-num-addition, .blob-code-addition, .js-blob-code-addition, .blob-code-marker-addition"
_CODE_CELLS = ("td.blob-code-inner", "td .blob-code-inner", "td.blob-code", "td:last-child")
_DIFF_LIKE_RE = re.compile(r"^(?:\+|-|\s|@@|diff)", re.MULTILINE)

_NON_PROSE = "pre, code, table, details, button, .btn, .d-none, .js-suggested-changes-container"
_UI_PHRASES = ("Suggested change", "Suggestion applied", "Commit suggestion")

SUGGESTED_CHANGE_PREFIX = "Suggested change:\n"
SUGGESTED_DIFF_PREFIX = "Suggested diff:\n"


def comment_body(comment: Tag) -> Tag | None:
    return comment.select_one(COMMENT_BODY)


def dedupe(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        key = item.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


def extract_list_items(container: Tag) -> list[str]:
    items = []
    for li in container.select(_LIST_ITEMS):
        text = safe_text(li)
        if text:
            items.append(text)
    return items


def extract_pattern_lines(container: Tag) -> list[str]:
    text = safe_text(container)
    if not text:
        return []
    items = []
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        match = _PATTERN_LINE_RE.match(line)
        if not match:
            continue
        candidate = match.group(2) or match.group(4) or line
        cleaned = _QUOTE_TRIM_RE.sub("", candidate)
        if cleaned:
            items.append(cleaned)
    return items


def _row_code_cell(row: Tag) -> Tag | None:
    for selector in _CODE_CELLS:
        cell = row.select_one(selector)
        if cell is not None:
            return cell
    cells = row.select("td")
    return cells[-1] if cells else None


def _table_to_diff(table: Tag) -> str:
    lines = []
    for row in table.select("tr"):
        text = safe_text(_row_code_cell(row))
        if not text:
            continue
        if row.select_one(_DELETION_MARKERS) is not None:
            lines.append("- " + text)
        elif row.select_one(_ADDITION_MARKERS) is not None:
            lines.append("+ " + text)
        else:
            lines.append("  " + text)
    return "\n".join(lines).strip()


def extract_suggested_change_blocks(container: Tag) -> list[str]:
    items = []

    for details in container.select("details"):
        summary_text = safe_text(details.select_one("summary")).lower()
        if "suggested change" in summary_text or "suggestion" in summary_text:
            code = safe_text(details.select_one("pre, code"))
            if code:
                items.append(SUGGESTED_CHANGE_PREFIX + code)

    for table in container.select(_SUGGESTED_CHANGE_TABLES):
        diff = _table_to_diff(table)
        if diff:
            items.append(SUGGESTED_DIFF_PREFIX + diff)

    for pre in container.select("pre"):
        code = safe_text(pre)
        if code and _DIFF_LIKE_RE.search(code):
            items.append(SUGGESTED_DIFF_PREFIX + code)

    return items


def segment(comment: Tag, fallback_min_length: int = 10) -> list[str]:
    body = comment_body(comment)
    if body is None:
        return []

    structured = [
        *extract_list_items(body),
        *extract_pattern_lines(body),
        *extract_suggested_change_blocks(body),
    ]
    if structured:
        return dedupe(structured)

    text = safe_text(body)
    if len(text) > fallback_min_length:
        return [text]
    return []


def extract_review_text(comment: Tag) -> str | None:
    """Comment prose with code, diff, table and button sub-elements removed."""
    body = comment.select_one(_TASK_LIST_BODY) or comment_body(comment)
    if body is None:
        return None
    clone = copy.copy(body)
    for node in clone.select(_NON_PROSE):
        node.extract()
    text = safe_text(clone)
    for phrase in _UI_PHRASES:
        text = text.replace(phrase, "")
    return text.strip() or None


def extract_primary_suggested_change(comment: Tag) -> str | None:
    body = comment_body(comment)
    if body is None:
        return None

    blocks = extract_suggested_change_blocks(body)
    if blocks:
        return blocks[0]

    for selector in ("pre", "code"):
        text = safe_text(body.select_one(selector))
        if text:
            return text
    return None


def summarize(text: str, max_length: int = 140, sentence_min: int = 60) -> str:
    collapsed = re.sub(r"\s+", " ", text).strip()
    if len(collapsed) <= max_length:
        return collapsed
    sentence_end = collapsed.find(".", sentence_min)
    if 0 < sentence_end < max_length:
        return collapsed[: sentence_end + 1]
    return collapsed[: max_length - 1] + "…"
