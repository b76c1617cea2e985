"""Watch command: debounced re-extraction when the snapshot changes."""

from __future__ import annotations

import argparse
import logging

from prharvest.commands.common import CommandRuntime, build_session, load_config
from prharvest.watcher import FileChangeFeed

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace, *, runtime: CommandRuntime) -> int:
    config = load_config(args)
    session = build_session(args, config, runtime=runtime)
    feed = FileChangeFeed(args.input)

    session.refresh()
    logger.info("Watching %s: %s", args.input, session.status)

    cycles = 0
    try:
        while args.max_cycles <= 0 or cycles < args.max_cycles:
            cycles += 1
            notification = feed.poll()
            if notification is not None:
                session.notify_change(notification)
            if session.poll():
                result = session.query()
                logger.info("Re-extracted %s: found=%s selected=%s", args.input, result.found, result.selected)
            runtime.sleep(config.watch.poll_interval_seconds)
    except KeyboardInterrupt:
        logger.info("Stopped watching %s", args.input)
    return 0
