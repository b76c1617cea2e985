"""Extraction orchestration: threads -> comments -> suggestions."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from urllib.parse import urljoin

from bs4 import Tag

from prharvest.classifier import is_primary_author
from prharvest.config import HarvestConfig, load_effective_config
from prharvest.fingerprint import suggestion_id, thread_identity
from prharvest.hooks import HookManager, HookName
from prharvest.locators import locate_context
from prharvest.models import Suggestion, ThreadContext
from prharvest.page import ReviewPage
from prharvest.segmenter import (
    COMMENT_BODY,
    extract_primary_suggested_change,
    extract_review_text,
    segment,
    summarize,
)

logger = logging.getLogger(__name__)

_COMMENT_BODY_MARKERS = f"{COMMENT_BODY}, div.edit-comment-hide > task-lists"
_TIMESTAMP = "relative-time, time-ago, time"
_HEADER_PERMALINK = 'a.Link--secondary[href*="#"]'


def prefer_primary_author(suggestions: list[Suggestion]) -> list[Suggestion]:
    """Keep only reviewer-authored suggestions when at least one exists.

    Collection-level policy: when classification finds no reviewer comment at
    all, the full list is returned unchanged rather than an empty one.
    """
    primary = [item for item in suggestions if item.is_primary_author]
    return primary if primary else list(suggestions)


def find_comment_roots(thread: Tag, selector: str) -> list[Tag]:
    candidates = [tag for tag in thread.select(selector) if tag.select_one(_COMMENT_BODY_MARKERS) is not None]
    candidate_ids = {id(tag) for tag in candidates}
    wrappers: set[int] = set()
    for candidate in candidates:
        for parent in candidate.parents:
            if id(parent) in candidate_ids:
                wrappers.add(id(parent))
    # Innermost roots only: a wrapper would read just the first of its comments.
    return [tag for tag in candidates if id(tag) not in wrappers]


def comment_permalink(comment: Tag, page_url: str) -> str:
    link = None
    timestamp = comment.select_one(_TIMESTAMP)
    if timestamp is not None:
        link = timestamp.find_parent("a")
    if link is None:
        link = comment.select_one(_HEADER_PERMALINK)
    href = link.get("href") if link is not None else None
    if not href:
        return page_url
    return urljoin(page_url, href)


class HarvestEngine:
    def __init__(self, config: HarvestConfig | None = None, hooks: HookManager | None = None) -> None:
        self.config = config or HarvestConfig()
        self.hooks = hooks or HookManager()

    @classmethod
    def from_config_dir(
        cls,
        config_dir: str | Path,
        user_defaults: dict | None = None,
        system_defaults: dict | None = None,
        runtime_override: dict | None = None,
        hooks: HookManager | None = None,
    ) -> HarvestEngine:
        config = load_effective_config(
            config_dir=config_dir,
            user_defaults=user_defaults,
            system_defaults=system_defaults,
            runtime_override=runtime_override,
        )
        return cls(config=config, hooks=hooks)

    def extract_all(self, page: ReviewPage) -> list[Suggestion]:
        started = time.perf_counter()
        extraction = self.config.extraction
        threads = page.soup.select(extraction.thread_selector)
        context = {"page": page.url, "thread_count": len(threads)}
        self.hooks.emit(HookName.BEFORE_EXTRACT, context, {})
        logger.debug("Found %s review thread containers on %s", len(threads), page.url)

        candidates: list[Suggestion] = []
        seen_thread_ids: set[str] = set()
        for thread in threads:
            thread_id = thread_identity(thread.get("id"), str(thread), extraction.frame_hash_prefix_chars)
            if thread_id in seen_thread_ids:
                thread_id = f"{thread_id}~{len(seen_thread_ids)}"
            seen_thread_ids.add(thread_id)
            try:
                built = self.extract_thread(thread, page.url, thread_id=thread_id)
            except Exception as exc:
                logger.warning("Skipping review thread %s: %s", thread.get("id") or "<anonymous>", exc)
                self.hooks.emit_error(exc, context)
                continue
            self.hooks.emit(HookName.AFTER_THREAD, context, {"thread_id": thread_id, "suggestions": len(built)})
            candidates.extend(built)

        self.hooks.emit(HookName.AFTER_EXTRACT, context, {"candidates": len(candidates)})

        result = prefer_primary_author(candidates) if extraction.prefer_primary_author else candidates
        self.hooks.emit(HookName.AFTER_FILTER, context, {"candidates": len(candidates), "kept": len(result)})
        logger.info(
            "Extracted %s suggestion(s) (%s candidates) from %s threads in %.3fs",
            len(result),
            len(candidates),
            len(threads),
            time.perf_counter() - started,
        )
        return result

    def extract_thread(self, thread: Tag, page_url: str, thread_id: str | None = None) -> list[Suggestion]:
        extraction = self.config.extraction
        comments = find_comment_roots(thread, extraction.comment_root_selector)
        if not comments:
            return []

        if thread_id is None:
            thread_id = thread_identity(thread.get("id"), str(thread), extraction.frame_hash_prefix_chars)
        thread_context = locate_context(thread)

        built: list[Suggestion] = []
        for comment_index, comment in enumerate(comments):
            texts = segment(comment, fallback_min_length=extraction.fallback_min_length)
            if not texts:
                continue
            built.extend(self._build_suggestions(comment, comment_index, texts, thread_id, thread_context, page_url))
        logger.debug("Thread %s: %s comment(s), %s suggestion(s)", thread_id, len(comments), len(built))
        return built

    def _build_suggestions(
        self,
        comment: Tag,
        comment_index: int,
        texts: list[str],
        thread_id: str,
        thread_context: ThreadContext,
        page_url: str,
    ) -> list[Suggestion]:
        extraction = self.config.extraction
        primary = is_primary_author(comment, self.config.reviewer)
        source_url = comment_permalink(comment, page_url)
        review_text = extract_review_text(comment)
        suggested_change = extract_primary_suggested_change(comment)

        suggestions = []
        for item_index, text in enumerate(texts):
            summary = summarize(
                review_text or text,
                max_length=extraction.summary_max_length,
                sentence_min=extraction.summary_sentence_min,
            )
            suggestions.append(
                Suggestion(
                    id=suggestion_id(thread_id, comment_index, item_index, text),
                    text=text,
                    summary=summary,
                    source_url=source_url,
                    is_primary_author=primary,
                    file_path=thread_context.file_path,
                    line_start=thread_context.lines.line_start,
                    line_end=thread_context.lines.line_end,
                    code_mentioned=thread_context.code_mentioned,
                    review_text=review_text,
                    suggested_change=suggested_change,
                )
            )
        return suggestions
