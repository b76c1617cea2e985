"""Select command: mutate the persisted selection for one page."""

from __future__ import annotations

import argparse
import logging

from prharvest.commands.common import CommandRuntime, build_session, load_config

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace, *, runtime: CommandRuntime) -> int:
    config = load_config(args)
    session = build_session(args, config, runtime=runtime)
    session.refresh()

    known = {item.id for item in session.suggestions}
    requested = [*args.select, *args.deselect, *args.ignore, *args.unignore]
    unknown = sorted({item_id for item_id in requested if item_id not in known})
    if unknown:
        logger.warning("Ids not present in the current extraction: %s", ", ".join(unknown))

    if args.reset:
        session.state.reset()
    if args.select:
        session.select(args.select)
    if args.deselect:
        session.deselect(args.deselect)
    if args.ignore:
        session.ignore(args.ignore)
    if args.unignore:
        session.unignore(args.unignore)
    if args.toggle_all:
        session.toggle_all()

    result = session.query()
    print(f"Found: {result.found} Selected: {result.selected}")
    return 0
