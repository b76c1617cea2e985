"""Decide whether a comment was written by the automated reviewer.

The decision is a short-circuit OR over independent evidence predicates,
evaluated in order. The rule set is deliberately permissive: a human comment
that merely mentions the reviewer by name (predicate 4) is classified as
reviewer-authored. That trade-off favours recall and is kept as-is.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from bs4 import Tag

from prharvest.config import ReviewerConfig
from prharvest.page import safe_text

AuthorPredicate = Callable[[Tag, ReviewerConfig], bool]

_AUTHOR_LINK = "a.author"
_BOT_BADGE = '[aria-label*="bot"], .Label--success, .Label[data-view-component="true"]'
_COMMENT_BODY = ".js-comment-body, .comment-body"


def _author_text(comment: Tag) -> str:
    return safe_text(comment.select_one(_AUTHOR_LINK)).lower()


def author_link_names_reviewer(comment: Tag, reviewer: ReviewerConfig) -> bool:
    """The author link text contains the reviewer name."""
    return reviewer.name.lower() in _author_text(comment)


def author_href_names_reviewer(comment: Tag, reviewer: ReviewerConfig) -> bool:
    """The author link points at the reviewer's profile."""
    link = comment.select_one(_AUTHOR_LINK)
    if link is None:
        return False
    href = link.get("href") or ""
    return re.search(reviewer.author_href_pattern, href) is not None


def bot_badge_with_reviewer_author(comment: Tag, reviewer: ReviewerConfig) -> bool:
    """A bot badge is shown and the author text also names the reviewer."""
    badge_text = safe_text(comment.select_one(_BOT_BADGE)).lower()
    return "bot" in badge_text and reviewer.name.lower() in _author_text(comment)


def body_mentions_reviewer(comment: Tag, reviewer: ReviewerConfig) -> bool:
    """The body names the reviewer as a whole word or uses an AI-review phrase."""
    body_text = safe_text(comment.select_one(_COMMENT_BODY)).lower()
    if not body_text:
        return False
    if re.search(rf"\b{re.escape(reviewer.name.lower())}\b", body_text):
        return True
    return any(re.search(phrase, body_text) for phrase in reviewer.body_phrases)


DEFAULT_PREDICATES: tuple[AuthorPredicate, ...] = (
    author_link_names_reviewer,
    author_href_names_reviewer,
    bot_badge_with_reviewer_author,
    body_mentions_reviewer,
)


def is_primary_author(
    comment: Tag,
    reviewer: ReviewerConfig | None = None,
    predicates: Sequence[AuthorPredicate] = DEFAULT_PREDICATES,
) -> bool:
    cfg = reviewer or ReviewerConfig()
    return any(predicate(comment, cfg) for predicate in predicates)
