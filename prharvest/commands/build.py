"""Build command: render prompt, Markdown or JSON output."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from prharvest.commands.common import CommandRuntime, build_session, load_config

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace, *, runtime: CommandRuntime) -> int:
    config = load_config(args)
    session = build_session(args, config, runtime=runtime)
    session.refresh()

    if args.copy:
        status = session.copy_selected(args.format, runtime.clipboard_factory())
        print(status)
        return 1 if status.startswith("Copy failed") else 0

    text = session.build(args.format, ids=args.ids)
    if args.output:
        Path(args.output).write_text(text)
        logger.info("Wrote %s output to %s", args.format, args.output)
    else:
        print(text)
    return 0
