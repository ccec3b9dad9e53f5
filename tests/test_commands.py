# tests/test_commands.py

from __future__ import annotations

from collections.abc import Iterable

from task_tracker.cli.commands import CommandRegistry, ConsoleSession, registry
from task_tracker.client.shell import TaskAppShell
from task_tracker.core.state import View
from task_tracker.tasks.task_models import TaskStatus

from .fakes import FakeTaskClient, make_task


def _session(shell: TaskAppShell, answers: Iterable[str] = ()) -> ConsoleSession:
    it = iter(answers)
    return ConsoleSession(shell=shell, ask=lambda _prompt: next(it))


def test_command_registry_routes_2_and_3_params(shell: TaskAppShell) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(session, args):
        called["h2"] += 1
        return "h2"

    def h3(session, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")
    session = _session(shell)

    assert reg.handle(session, "/a x") == "h2"
    assert reg.handle(session, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


def test_command_registry_unknown_and_non_command(shell: TaskAppShell) -> None:
    reg = CommandRegistry()
    session = _session(shell)
    assert reg.handle(session, "hello") is None
    assert "Unknown command" in (reg.handle(session, "/nope") or "")


def test_new_creates_through_form(shell: TaskAppShell, fake_client: FakeTaskClient) -> None:
    session = _session(shell, ["Buy milk", "2%", "in-progress"])
    emitted: list[str] = []

    out = registry.handle(session, "/new", emit=emitted.append) or ""

    assert emitted and emitted[0].startswith("Create New Task")
    assert [t.title for t in shell.state.tasks] == ["Buy milk"]
    assert shell.state.tasks[0].status == TaskStatus.IN_PROGRESS
    assert shell.state.view == View.LIST
    assert "Total: 1" in out
    assert fake_client.calls[-1][0] == "create"


def test_new_with_blank_title_does_not_call_api(shell: TaskAppShell, fake_client: FakeTaskClient) -> None:
    session = _session(shell, ["", "", ""])
    out = registry.handle(session, "/new") or ""
    assert "Please enter a task title" in out
    assert fake_client.calls == []


def test_new_retries_unknown_status(shell: TaskAppShell) -> None:
    session = _session(shell, ["t", "", "done", "completed"])
    registry.handle(session, "/new")
    assert shell.state.tasks[0].status == TaskStatus.COMPLETED


def test_cancel_returns_to_list(shell: TaskAppShell, fake_client: FakeTaskClient) -> None:
    session = _session(shell, ["/cancel"])
    out = registry.handle(session, "/new") or ""
    assert out.startswith("Cancelled.")
    assert shell.state.view == View.LIST
    assert fake_client.calls == []


def test_edit_keeps_values_on_empty_input() -> None:
    client = FakeTaskClient([make_task(4, "Buy milk", description="2%")])
    shell = TaskAppShell(client)
    shell.mount()
    session = _session(shell, ["", "", "completed"])

    registry.handle(session, "/edit 4")

    task = shell.find_task(4)
    assert task is not None
    assert (task.title, task.description, task.status) == ("Buy milk", "2%", TaskStatus.COMPLETED)
    assert client.calls[-1] == ("update", (4, {"title": "Buy milk", "description": "2%", "status": "completed"}))
    assert shell.state.editing_task is None


def test_edit_and_delete_usage_errors(shell: TaskAppShell) -> None:
    session = _session(shell)
    assert registry.handle(session, "/edit") == "Usage: /edit <id>"
    assert registry.handle(session, "/delete x") == "Not a task id: x"
    assert "No task #9" in (registry.handle(session, "/delete 9") or "")


def test_delete_asks_first() -> None:
    client = FakeTaskClient([make_task(1, "Buy milk")])
    shell = TaskAppShell(client)
    shell.mount()

    assert registry.handle(_session(shell, ["n"]), "/delete 1") == "Kept."
    assert shell.find_task(1) is not None

    registry.handle(_session(shell, ["y"]), "/rm #1")
    assert shell.find_task(1) is None
    assert ("delete", 1) in client.calls


def test_refresh_and_show() -> None:
    client = FakeTaskClient([make_task(1, "a")])
    shell = TaskAppShell(client)
    session = _session(shell)

    assert "#1 a" in (registry.handle(session, "/refresh") or "")
    client.tasks[1] = make_task(1, "a2")
    assert "#1 a2" in (registry.handle(session, "/show 1") or "")


def test_help_lists_commands(shell: TaskAppShell) -> None:
    text = registry.handle(_session(shell), "/help") or ""
    for name in ("/new", "/edit", "/delete", "/list", "/refresh"):
        assert name in text
