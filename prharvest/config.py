"""Configuration models and loading for prharvest."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

CONFIG_FILENAME = ".prharvest.yaml"


class ReviewerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = "copilot"
    display_name: str = "GitHub Copilot"
    author_href_pattern: str = r"github-?copilot"
    body_phrases: list[str] = Field(default_factory=lambda: [r"ai\s+review"])


class ExtractionConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    thread_selector: str = 'turbo-frame[id^="review-thread-or-comment-id-"]'
    comment_root_selector: str = 'article, .js-comment, div[id^="discussion_r"]'
    html_parser: str = "html.parser"
    summary_max_length: int = Field(default=140, ge=2)
    summary_sentence_min: int = Field(default=60, ge=0)
    fallback_min_length: int = Field(default=10, ge=0)
    frame_hash_prefix_chars: int = Field(default=512, ge=1)
    prefer_primary_author: bool = True


class StateConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    backend: str = "sqlite"
    sqlite_path: str = ".prharvest/state.db"
    key_prefix: str = "prharvest"


class WatchConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    settle_seconds: float = Field(default=0.15, ge=0.0)
    notification_settle_seconds: float = Field(default=0.3, ge=0.0)
    poll_interval_seconds: float = Field(default=0.5, gt=0.0)


class HarvestConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reviewer: ReviewerConfig = Field(default_factory=ReviewerConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    state: StateConfig = Field(default_factory=StateConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def load_effective_config(
    config_dir: str | Path = ".",
    user_defaults: dict[str, Any] | None = None,
    system_defaults: dict[str, Any] | None = None,
    runtime_override: dict[str, Any] | None = None,
) -> HarvestConfig:
    """Load config with precedence runtime > project .prharvest.yaml > user > system."""
    project_config = _load_yaml(Path(config_dir) / CONFIG_FILENAME)

    merged: dict[str, Any] = {}
    for layer in (system_defaults, user_defaults, project_config, runtime_override):
        if layer:
            merged = _deep_merge(merged, layer)

    return HarvestConfig.model_validate(merged)
