"""Render selected suggestions as an LLM prompt, Markdown, or JSON.

All builders preserve input order; numbering is the position in the list.
"""

from __future__ import annotations

from collections.abc import Sequence

from prharvest.models import NormalizedSuggestion, OutputFormat, Suggestion, SuggestionExport

DEFAULT_REVIEWER_LABEL = "GitHub Copilot"


def _file_line(item: Suggestion) -> str | None:
    label = item.line_label
    if not item.file_path and not label:
        return None
    suffix = f" ({label})" if label else ""
    return f"File: {item.file_path or 'unknown'}{suffix}"


def _suggestion_block(item: Suggestion) -> str:
    source = item.suggested_change or item.text
    if source.strip().startswith("Suggested"):
        return source
    return f"Suggested change:\n{source}"


def build_prompt(items: Sequence[Suggestion], page_url: str, reviewer_label: str = DEFAULT_REVIEWER_LABEL) -> str:
    header = "\n".join(
        [
            f"Task: Apply the following {reviewer_label} review suggestions to the codebase in this PR.",
            f"PR: {page_url}",
            "Instructions:",
            "- For each item, implement the change described.",
            "- If multiple files are impacted, update all relevant locations.",
            "- Preserve existing behavior unless a change is explicitly requested.",
            "",
        ]
    )

    blocks: list[str] = []
    for idx, item in enumerate(items, start=1):
        parts = [
            f"#{idx} {item.summary}",
            _file_line(item),
            f"Code mentioned:\n{item.code_mentioned}" if item.code_mentioned else None,
            f"Review:\n{item.review_text}" if item.review_text else None,
            _suggestion_block(item),
            "",
        ]
        blocks.append("\n".join(part for part in parts if part is not None))

    return header + "\n" + "\n".join(blocks)


def build_markdown(items: Sequence[Suggestion], page_url: str) -> str:
    lines: list[str] = [f"## PR: {page_url}", ""]

    sections: list[str] = []
    for idx, item in enumerate(items, start=1):
        blocks = [f"### {idx}. {item.summary}"]
        title = " ".join(part for part in (item.file_path, f"({item.line_label})" if item.line_label else None) if part)
        if title:
            blocks.append(f"File: {title}")
        if item.code_mentioned:
            blocks.append(f"Code mentioned:\n\n```\n{item.code_mentioned}\n```")
        if item.review_text:
            blocks.append(f"Review:\n\n{item.review_text}")
        if item.suggested_change:
            blocks.append(f"Suggested change:\n\n```\n{item.suggested_change}\n```")
        sections.append("\n\n".join(blocks))

    lines.extend(sections)
    return "\n".join(lines)


def build_json(items: Sequence[Suggestion], page_url: str) -> str:
    export = SuggestionExport(
        page=page_url,
        suggestions=[NormalizedSuggestion.from_suggestion(item) for item in items],
    )
    return export.model_dump_json(indent=2, by_alias=True)


def build_output(fmt: OutputFormat | str, items: Sequence[Suggestion], page_url: str, reviewer_label: str = DEFAULT_REVIEWER_LABEL) -> str:
    resolved = OutputFormat(fmt)
    if resolved == OutputFormat.PROMPT:
        return build_prompt(items, page_url, reviewer_label=reviewer_label)
    if resolved == OutputFormat.MARKDOWN:
        return build_markdown(items, page_url)
    return build_json(items, page_url)
