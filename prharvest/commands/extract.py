"""Extract command."""

from __future__ import annotations

import argparse
import json

from prharvest.commands.common import CommandRuntime, build_session, load_config


def run(args: argparse.Namespace, *, runtime: CommandRuntime) -> int:
    config = load_config(args)
    session = build_session(args, config, runtime=runtime)
    session.refresh()
    result = session.query()

    if args.json:
        print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
        return 0

    items = session.suggestions if args.all else result.suggestions
    print(f"Page: {session.page_url}")
    print(f"Found: {result.found} Selected: {result.selected}")
    if not items:
        print(session.empty_message() or "No suggestions to show.")
        return 0

    for item in items:
        if item.id in session.state.ignored:
            marker = "-"
        elif session.state.is_selected(item.id):
            marker = "x"
        else:
            marker = " "
        location = " ".join(part for part in (item.file_path, item.line_label) if part)
        print(f"[{marker}] {item.id}")
        print(f"    {item.summary}")
        if location:
            print(f"    {location}")
    return 0
