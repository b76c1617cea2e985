"""CLI entrypoint for prharvest."""

from __future__ import annotations

import logging

from prharvest.commands import build, extract, select, serve, watch
from prharvest.commands.common import normalize_command
from prharvest.commands.parser import build_parser
from prharvest.logging_utils import configure_logging
from prharvest.services.command_runtime import CommandRuntime

logger = logging.getLogger(__name__)

COMMANDS = {
    "extract": extract.run,
    "build": build.run,
    "select": select.run,
    "watch": watch.run,
    "serve": serve.run,
}


def main(argv: list[str] | None = None, runtime: CommandRuntime | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    handler = COMMANDS.get(normalize_command(args.command))
    if handler is None:
        parser.print_help()
        return 1
    try:
        return handler(args, runtime=runtime or CommandRuntime())
    except ValueError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
