import json
from pathlib import Path

import pytest

from prharvest import cli
from prharvest.clipboard import MemoryClipboard
from prharvest.services.command_runtime import CommandRuntime
from prharvest.storage import MemoryKeyValueStore

from conftest import PAGE_URL


@pytest.fixture
def snapshot(tmp_path: Path, mixed_page_html: str) -> Path:
    path = tmp_path / "review.html"
    path.write_text(mixed_page_html)
    return path


@pytest.fixture
def runtime() -> CommandRuntime:
    store = MemoryKeyValueStore()
    clipboard = MemoryClipboard()
    return CommandRuntime(
        storage_cls=lambda path: store,
        clipboard_factory=lambda: clipboard,
        sleep=lambda seconds: None,
    )


def _page_args(snapshot: Path, tmp_path: Path) -> list[str]:
    return ["--input", str(snapshot), "--url", PAGE_URL, "--config-dir", str(tmp_path)]


def _extract_json(snapshot: Path, tmp_path: Path, runtime: CommandRuntime, capsys) -> dict:
    assert cli.main(["extract", *_page_args(snapshot, tmp_path), "--json"], runtime=runtime) == 0
    return json.loads(capsys.readouterr().out)


def test_cli_parser_supports_command_aliases() -> None:
    parser = cli.build_parser()
    assert parser.parse_args(["ls", "--input", "a.html", "--url", PAGE_URL]).command == "ls"
    assert parser.parse_args(["export", "--input", "a.html", "--url", PAGE_URL]).command == "export"
    assert parser.parse_args(["serve", "--input", "a.html", "--url", PAGE_URL]).port == 8765


def test_extract_lists_suggestions(snapshot: Path, tmp_path: Path, runtime: CommandRuntime, capsys) -> None:
    assert cli.main(["extract", *_page_args(snapshot, tmp_path)], runtime=runtime) == 0
    out = capsys.readouterr().out
    assert "Found: 2 Selected: 2" in out
    assert "[x] review-thread-or-comment-id-101:0:0:" in out
    assert "src/app/parser.py L67-L87" in out


def test_extract_json_payload(snapshot: Path, tmp_path: Path, runtime: CommandRuntime, capsys) -> None:
    payload = _extract_json(snapshot, tmp_path, runtime, capsys)
    assert payload["found"] == 2
    assert payload["isReviewPage"] is True
    assert len(payload["selectedIds"]) == 2


def test_select_then_build_uses_persisted_selection(snapshot: Path, tmp_path: Path, runtime: CommandRuntime, capsys) -> None:
    ids = _extract_json(snapshot, tmp_path, runtime, capsys)["selectedIds"]

    assert cli.main(["sel", *_page_args(snapshot, tmp_path), "--deselect", ids[0]], runtime=runtime) == 0
    assert "Found: 2 Selected: 1" in capsys.readouterr().out

    assert cli.main(["build", *_page_args(snapshot, tmp_path), "--format", "json"], runtime=runtime) == 0
    exported = json.loads(capsys.readouterr().out)
    assert [item["id"] for item in exported["suggestions"]] == [ids[1]]

    assert cli.main(["select", *_page_args(snapshot, tmp_path), "--reset"], runtime=runtime) == 0
    assert "Selected: 2" in capsys.readouterr().out


def test_build_writes_output_file_for_explicit_ids(snapshot: Path, tmp_path: Path, runtime: CommandRuntime, capsys) -> None:
    ids = _extract_json(snapshot, tmp_path, runtime, capsys)["selectedIds"]
    out_path = tmp_path / "prompt.md"

    exit_code = cli.main(
        ["export", *_page_args(snapshot, tmp_path), "--format", "markdown", "--ids", ids[1], "--output", str(out_path)],
        runtime=runtime,
    )

    assert exit_code == 0
    text = out_path.read_text()
    assert text.startswith(f"## PR: {PAGE_URL}")
    assert "### 1. " in text
    assert "### 2. " not in text


def test_build_copy_reports_status(snapshot: Path, tmp_path: Path, runtime: CommandRuntime, capsys) -> None:
    assert cli.main(["build", *_page_args(snapshot, tmp_path), "--copy"], runtime=runtime) == 0
    assert "Copied 2 suggestion(s) to clipboard" in capsys.readouterr().out
    assert runtime.clipboard_factory().contents[0].startswith("Task: Apply")


def test_watch_runs_bounded_cycles(snapshot: Path, tmp_path: Path, runtime: CommandRuntime) -> None:
    assert cli.main(["watch", *_page_args(snapshot, tmp_path), "--max-cycles", "3"], runtime=runtime) == 0


def test_missing_input_returns_error_code(tmp_path: Path, runtime: CommandRuntime) -> None:
    args = ["extract", "--input", str(tmp_path / "missing.html"), "--url", PAGE_URL, "--config-dir", str(tmp_path)]
    assert cli.main(args, runtime=runtime) == 2


def test_memory_backend_from_config(snapshot: Path, tmp_path: Path, capsys) -> None:
    (tmp_path / ".prharvest.yaml").write_text("state:\n  backend: memory\n")
    assert cli.main(["extract", *_page_args(snapshot, tmp_path)], runtime=CommandRuntime()) == 0
    assert "Found: 2" in capsys.readouterr().out


def test_unusable_state_path_falls_back_to_memory(snapshot: Path, tmp_path: Path, capsys, caplog) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    override = tmp_path / "override.yaml"
    override.write_text(f"state:\n  sqlite_path: {blocker / 'sub' / 'state.db'}\n")

    args = ["extract", *_page_args(snapshot, tmp_path), "--runtime-override", str(override)]
    assert cli.main(args, runtime=CommandRuntime()) == 0
    assert "Found: 2" in capsys.readouterr().out
    assert "Could not open state store" in caplog.text
