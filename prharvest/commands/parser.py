"""CLI parser construction."""

from __future__ import annotations

import argparse

from prharvest.commands.common import add_common_config_flags, add_page_flags
from prharvest.models import OutputFormat


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Harvest automated review suggestions into LLM-ready prompts")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR)")

    sub = parser.add_subparsers(dest="command", required=True)

    extract = sub.add_parser("extract", aliases=["ls"], help="List suggestions found in a review page snapshot")
    add_page_flags(extract)
    extract.add_argument("--json", action="store_true", help="Emit the query result as JSON")
    extract.add_argument("--all", action="store_true", help="Include ignored suggestions")
    add_common_config_flags(extract)

    build = sub.add_parser("build", aliases=["export"], help="Build prompt, Markdown or JSON output")
    add_page_flags(build)
    build.add_argument(
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.PROMPT.value,
        help="Output encoding",
    )
    build.add_argument("--ids", nargs="*", help="Explicit suggestion ids (default: current selection)")
    build.add_argument("--output", help="Write output to this file instead of stdout")
    build.add_argument("--copy", action="store_true", help="Copy the current selection to the system clipboard")
    add_common_config_flags(build)

    select = sub.add_parser("select", aliases=["sel"], help="Change the persisted selection for a page")
    add_page_flags(select)
    select.add_argument("--select", nargs="+", default=[], metavar="ID", help="Mark ids as selected")
    select.add_argument("--deselect", nargs="+", default=[], metavar="ID", help="Mark ids as deselected")
    select.add_argument("--ignore", nargs="+", default=[], metavar="ID", help="Hide ids from the list")
    select.add_argument("--unignore", nargs="+", default=[], metavar="ID", help="Show previously ignored ids again")
    select.add_argument("--toggle-all", action="store_true", help="Select all visible ids, or none if all are selected")
    select.add_argument("--reset", action="store_true", help="Forget all selection state for the page")
    add_common_config_flags(select)

    watch = sub.add_parser("watch", help="Re-extract whenever the snapshot file changes")
    add_page_flags(watch)
    watch.add_argument("--max-cycles", type=int, default=0, help="Stop after N poll cycles (0 = run until interrupted)")
    add_common_config_flags(watch)

    serve = sub.add_parser("serve", aliases=["serve-ui"], help="Serve the query API over one snapshot")
    add_page_flags(serve)
    serve.add_argument("--host", default="127.0.0.1", help="Bind host")
    serve.add_argument("--port", type=int, default=8765, help="Bind port")
    add_common_config_flags(serve)

    return parser
