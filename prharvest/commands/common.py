"""Shared helpers for CLI command modules."""

from __future__ import annotations

import argparse
import logging
import sqlite3
from pathlib import Path

import yaml

from prharvest.config import HarvestConfig, load_effective_config
from prharvest.page import FilePageSource, is_review_page
from prharvest.pipeline import HarvestEngine
from prharvest.services.command_runtime import CommandRuntime
from prharvest.session import ReviewSession
from prharvest.storage.base import KeyValueBackend

logger = logging.getLogger(__name__)

ALIAS_TO_CANONICAL = {
    "ls": "extract",
    "export": "build",
    "sel": "select",
    "serve-ui": "serve",
}


def normalize_command(name: str) -> str:
    return ALIAS_TO_CANONICAL.get(name, name)


def load_yaml_dict(path: str | None) -> dict | None:
    if not path:
        return None
    data = yaml.safe_load(Path(path).read_text())
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def load_config(args: argparse.Namespace) -> HarvestConfig:
    return load_effective_config(
        config_dir=args.config_dir,
        user_defaults=load_yaml_dict(args.user_config),
        system_defaults=load_yaml_dict(args.system_config),
        runtime_override=load_yaml_dict(args.runtime_override),
    )


def add_common_config_flags(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--config-dir", default=".", help="Directory holding an optional .prharvest.yaml")
    cmd.add_argument("--user-config", help="Optional user defaults YAML")
    cmd.add_argument("--system-config", help="Optional system defaults YAML")
    cmd.add_argument("--runtime-override", help="Optional runtime override YAML")


def add_page_flags(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--input", required=True, help="Path to a saved HTML snapshot of the review page")
    cmd.add_argument("--url", required=True, help="Address of the review page the snapshot was taken from")


def open_backend(config: HarvestConfig, runtime: CommandRuntime) -> KeyValueBackend:
    if config.state.backend == "memory":
        return runtime.memory_storage_cls()
    if config.state.backend != "sqlite":
        raise ValueError(f"Unsupported state.backend: {config.state.backend}")
    try:
        return runtime.storage_cls(config.state.sqlite_path)
    except (OSError, sqlite3.Error) as exc:
        logger.warning("Could not open state store %s, selection will not persist: %s", config.state.sqlite_path, exc)
        return runtime.memory_storage_cls()


def build_session(args: argparse.Namespace, config: HarvestConfig, *, runtime: CommandRuntime) -> ReviewSession:
    if not Path(args.input).exists():
        raise ValueError(f"input snapshot does not exist: {args.input}")
    if not is_review_page(args.url):
        logger.warning("%s does not look like a pull request page; extracting anyway", args.url)
    source = FilePageSource(args.input, args.url, parser=config.extraction.html_parser)
    return ReviewSession(
        page_source=source,
        backend=open_backend(config, runtime),
        engine=HarvestEngine(config=config),
        config=config,
    )
