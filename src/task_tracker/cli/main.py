# src/task_tracker/cli/main.py

"""
CLI entrypoint.

  task-tracker serve     run the REST API under uvicorn
  task-tracker console   run the interactive console client against the API

Both initialize logging from settings first.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

import uvicorn

from ..config import get_settings
from ..logging_setup import level_from_name, setup_logging
from .bootstrap import create_console_session, create_server_app

logger = logging.getLogger(__name__)


def _build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="task-tracker", description="Personal task tracker.")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the REST API server.")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)

    sub.add_parser("console", help="Run the console client.")
    return parser


def serve(settings, *, host: str, port: int) -> None:
    app = create_server_app(settings=settings)
    logger.info("Server listening on http://%s:%s (endpoints under /api/tasks)", host, port)
    # log_config=None keeps uvicorn on the handlers installed by setup_logging().
    uvicorn.run(app, host=host, port=port, log_config=None)


def console(settings) -> None:
    from ..client.console import run_console_loop

    session = create_console_session(settings=settings)
    try:
        run_console_loop(session)
    finally:
        session.shell.client.close()  # type: ignore[attr-defined]
        logger.info("Bye.")


def main(argv: Sequence[str] | None = None) -> None:
    settings = get_settings()
    args = _build_parser(settings).parse_args(argv)

    console_level = level_from_name(settings.log_level)
    # The console client keeps stderr quiet so logs don't interleave with prompts.
    if args.command == "console":
        console_level = max(console_level, logging.WARNING)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (%s)...", settings.app_name, args.command)

    if args.command == "serve":
        serve(settings, host=args.host, port=args.port)
    else:
        console(settings)


if __name__ == "__main__":
    main()
