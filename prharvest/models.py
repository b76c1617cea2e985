"""Core Pydantic domain models for prharvest."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class OutputFormat(str, Enum):
    PROMPT = "prompt"
    MARKDOWN = "markdown"
    JSON = "json"


class LineRange(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    line_start: int | None = None
    line_end: int | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> LineRange:
        if (self.line_start is None) != (self.line_end is None):
            raise ValueError("line_start and line_end must both be set or both be None")
        if self.line_start is not None and self.line_end is not None and self.line_start > self.line_end:
            raise ValueError("line_start must not exceed line_end")
        return self

    @property
    def label(self) -> str | None:
        if self.line_start is None or self.line_end is None:
            return None
        if self.line_start == self.line_end:
            return f"L{self.line_start}"
        return f"L{self.line_start}-L{self.line_end}"


class ThreadContext(BaseModel):
    """Reviewed location shared by every comment of one thread container."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    file_path: str | None = None
    lines: LineRange = Field(default_factory=LineRange)
    code_mentioned: str | None = None


class Suggestion(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    text: str
    summary: str
    source_url: str
    is_primary_author: bool = False
    file_path: str | None = None
    line_start: int | None = None
    line_end: int | None = None
    code_mentioned: str | None = None
    review_text: str | None = None
    suggested_change: str | None = None

    @model_validator(mode="after")
    def _check_lines(self) -> Suggestion:
        LineRange(line_start=self.line_start, line_end=self.line_end)
        return self

    @property
    def line_label(self) -> str | None:
        return LineRange(line_start=self.line_start, line_end=self.line_end).label


class NormalizedSuggestion(BaseModel):
    """Export shape: every optional field is present, absent values are null."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    id: str
    file_path: str | None
    line_start: int | None
    line_end: int | None
    summary: str
    code_mentioned: str | None
    review_text: str | None
    suggested_change: str | None
    source_url: str

    @classmethod
    def from_suggestion(cls, suggestion: Suggestion) -> NormalizedSuggestion:
        return cls(
            id=suggestion.id,
            file_path=suggestion.file_path or None,
            line_start=suggestion.line_start,
            line_end=suggestion.line_end,
            summary=suggestion.summary,
            code_mentioned=suggestion.code_mentioned or None,
            review_text=suggestion.review_text or None,
            suggested_change=suggestion.suggested_change or None,
            source_url=suggestion.source_url,
        )


class SuggestionExport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    page: str
    suggestions: list[NormalizedSuggestion] = Field(default_factory=list)


class QueryResult(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    found: int
    selected: int
    suggestions: list[Suggestion] = Field(default_factory=list)
    selected_ids: list[str] = Field(default_factory=list)
    is_review_page: bool = True
