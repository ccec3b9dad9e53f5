# src/task_tracker/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import cast

from ..client.shell import TaskAppShell
from ..client.views import TaskFormView, TaskListView, render_header
from ..core.state import View
from ..tasks.task_models import Task, TaskStatus

CommandEmitter = Callable[[str], None]
Asker = Callable[[str], str]

logger = logging.getLogger(__name__)

_YES = {"y", "yes"}
_CANCEL = "/cancel"


@dataclass
class ConsoleSession:
    """Everything a command needs: the shell, both views, and a way to prompt the user."""

    shell: TaskAppShell
    ask: Asker = input
    list_view: TaskListView = field(default_factory=TaskListView)
    form_view: TaskFormView = field(default_factory=TaskFormView)

    def confirm(self, prompt: str) -> bool:
        return self.ask(f"{prompt} [y/N] ").strip().lower() in _YES

    def render_list(self) -> str:
        state = self.shell.state
        header = render_header(self.shell.stats(), state.error)
        return f"{header}\n\n{self.list_view.render(state.tasks, loading=state.loading)}"


CommandHandler2 = Callable[[ConsoleSession, list[str]], str]
CommandHandler3 = Callable[[ConsoleSession, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /new, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        session: ConsoleSession,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(session, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(session, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(session: ConsoleSession, args: list[str], usage: str) -> Task | str:
    if not args:
        return usage
    try:
        task_id = int(args[0].lstrip("#"))
    except ValueError:
        return f"Not a task id: {args[0]}"
    task = session.shell.find_task(task_id)
    if task is None:
        return f"No task #{task_id} in the list. Use /refresh to reload."
    return task


def _fill_form(session: ConsoleSession) -> bool:
    """Prompt for each field; empty input keeps the current value. False means cancelled."""
    form = session.form_view
    statuses = "/".join(s.value for s in TaskStatus)

    title = session.ask(f"Title [{form.title}]: ").strip()
    if title == _CANCEL:
        return False
    if title:
        form.set_field("title", title)

    description = session.ask(f"Description [{form.description}] ('-' clears): ").strip()
    if description == _CANCEL:
        return False
    if description == "-":
        form.set_field("description", "")
    elif description:
        form.set_field("description", description)

    hint = ""
    while True:
        raw = session.ask(f"{hint}Status ({statuses}) [{form.status.value}]: ").strip()
        if raw == _CANCEL:
            return False
        if not raw:
            return True
        try:
            form.set_field("status", raw)
            return True
        except ValueError:
            hint = f"Unknown status {raw!r}. "


def _run_form(session: ConsoleSession, emit: CommandEmitter | None) -> str:
    shell = session.shell
    form = session.form_view
    form.load(shell.state.editing_task)

    if emit:
        with contextlib.suppress(Exception):
            emit(form.render())
        with contextlib.suppress(Exception):
            emit(f"(type {_CANCEL} at any prompt to go back)")

    if not _fill_form(session):
        shell.cancel_edit()
        return "Cancelled.\n\n" + session.render_list()

    if not form.submit(shell.submit_form):
        if form.error:
            return form.render()
        return f"[!] {shell.state.error or 'Request failed'}"

    return session.render_list()


def cmd_help(session: ConsoleSession, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(session: ConsoleSession, args: list[str]) -> str:
    session.shell.show_list()
    return session.render_list()


def cmd_refresh(session: ConsoleSession, args: list[str]) -> str:
    session.shell.load_tasks()
    session.shell.show_list()
    return session.render_list()


def cmd_show(session: ConsoleSession, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    try:
        task_id = int(args[0].lstrip("#"))
    except ValueError:
        return f"Not a task id: {args[0]}"
    task = session.shell.refresh_task(task_id)
    if task is None:
        return f"[!] {session.shell.state.error}"
    return session.list_view.render([task])


def cmd_new(
    session: ConsoleSession,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    session.shell.start_create()
    return _run_form(session, emit)


def cmd_edit(
    session: ConsoleSession,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    found = _parse_id(session, args, "Usage: /edit <id>")
    if isinstance(found, str):
        return found
    session.shell.start_edit(found)
    return _run_form(session, emit)


def cmd_delete(session: ConsoleSession, args: list[str]) -> str:
    found = _parse_id(session, args, "Usage: /delete <id>")
    if isinstance(found, str):
        return found
    if not session.list_view.request_delete(found, session.confirm, session.shell.delete_task):
        return "Kept."
    return session.render_list()


def cmd_view(session: ConsoleSession, args: list[str]) -> str:
    state = session.shell.state
    if state.view == View.FORM and state.editing_task is not None:
        return f"View: {state.view.value} (editing #{state.editing_task.id})"
    return f"View: {state.view.value}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks and counts.", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Reload tasks from the server.")
registry.register("show", cmd_show, help_text="Fetch one task from the server: /show <id>.")
registry.register("new", cmd_new, help_text="Create a task.", aliases=["add"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task (asks first): /delete <id>.", aliases=["rm"])
registry.register("view", cmd_view, help_text="Show the active view.")
