"""Serve command."""

from __future__ import annotations

import argparse
import logging

from prharvest.commands.common import CommandRuntime, build_session, load_config

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace, *, runtime: CommandRuntime) -> int:
    config = load_config(args)
    session = build_session(args, config, runtime=runtime)

    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - dependency/runtime
        raise RuntimeError("Missing optional UI dependencies. Install with: pip install 'prharvest[ui]'") from exc

    from prharvest.webapp import create_app

    session.refresh()
    logger.info("Serving %s on http://%s:%s (%s)", args.url, args.host, args.port, session.status)
    uvicorn.run(create_app(session), host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0
