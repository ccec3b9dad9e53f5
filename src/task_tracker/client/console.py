# src/task_tracker/client/console.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import ConsoleSession
from ..cli.commands import registry as command_registry

logger = logging.getLogger(__name__)

_EXIT = ("/exit", "/quit")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(session: ConsoleSession) -> None:
    app_name = str(getattr(getattr(session.shell.state, "settings", None), "app_name", "task-tracker"))
    logger.info("Console client started.")
    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(text, flush=True)

    session.shell.mount()
    print(session.render_list() + "\n")

    while True:
        try:
            line = session.ask(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in _EXIT:
            logger.info("Console exit command received.")
            break

        if not line.startswith("/"):
            print("Commands start with '/'. Use /help to list them.")
            continue

        try:
            response = command_registry.handle(session, line, emit=emit)
        except (EOFError, KeyboardInterrupt):
            # Ctrl+D / Ctrl+C inside a form prompt: abandon the form only.
            session.shell.cancel_edit()
            response = "\nCancelled."
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(f"{response}\n")

    logger.info("Console client finished.")
