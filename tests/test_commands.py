# tests/test_commands.py

from __future__ import annotations

from taskodoro.cli.commands import ChatContext, CommandRegistry, registry
from taskodoro.connectors.console_connector import console_context, handle_console_line
from taskodoro.core.state import AppState

ALICE = ChatContext(username="alice")
BOB = ChatContext(username="bob")
MOD = ChatContext(username="mod", is_moderator=True)


def test_command_registry_routes_and_aliases(state: AppState) -> None:
    reg = CommandRegistry()
    called: list[list[str]] = []

    def h(state, args, ctx):
        called.append(args)
        return f"hi {ctx.username}"

    reg.register("greet", h, "greet", aliases=["g"])

    assert reg.handle(state, "!greet a b", ALICE) == "hi alice"
    assert reg.handle(state, "!G", ALICE) == "hi alice"
    assert called == [["a", "b"], []]


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    assert registry.handle(state, "hello chat", ALICE) is None
    assert registry.handle(state, "!nope", ALICE) is None
    assert registry.handle(state, "!", ALICE) is None


def test_add_edit_done_flow(state: AppState) -> None:
    assert registry.handle(state, "!add write the intro", ALICE) == '@alice Task added: "write the intro" (ID: 1)'
    assert registry.handle(state, "!add", ALICE) == "@alice Usage: !add <task description>"

    assert registry.handle(state, "!edit 1 write the outro", ALICE) == '@alice Task 1 updated: "write the outro"'
    assert registry.handle(state, "!edit x new", ALICE) == "@alice Please provide a valid task ID"

    reply = registry.handle(state, "!done 1", BOB)
    assert reply.startswith("@bob ")
    assert state.core.list_tasks()[0]["status"] == "pending"

    assert registry.handle(state, "!done 1", ALICE) == "@alice Task 1 marked as completed! ✅"
    assert registry.handle(state, "!done 7", ALICE) == "@alice Task 7 not found"


def test_mytasks_lists_pending_and_counts_done(state: AppState) -> None:
    assert registry.handle(state, "!mytasks", ALICE) == "@alice You have no tasks."

    registry.handle(state, "!add short one", ALICE)
    registry.handle(state, "!add " + "x" * 40, ALICE)
    registry.handle(state, "!add finished", ALICE)
    registry.handle(state, "!add not mine", BOB)
    registry.handle(state, "!done 3", ALICE)

    reply = registry.handle(state, "!mytasks", ALICE)
    assert reply == "@alice Your tasks: Pending: 1: short one, 2: " + "x" * 30 + "... | Completed: 1"


def test_cleardone_requires_moderator(state: AppState) -> None:
    registry.handle(state, "!add a", ALICE)
    registry.handle(state, "!done 1", ALICE)

    assert "Only the broadcaster or moderators" in registry.handle(state, "!cleardone", ALICE)
    assert len(state.core.list_tasks()) == 1

    assert registry.handle(state, "!cleardone", MOD) == "@mod Cleared 1 completed tasks"
    assert state.core.list_tasks() == []


def test_pomodoro_commands(state: AppState) -> None:
    assert registry.handle(state, "!pomo", MOD).startswith("@mod 🍅 Pomodoro started!")
    assert registry.handle(state, "!pstatus", ALICE) == (
        "@alice 🍅 Work session 1: 25:00 remaining → then 10-min break"
    )

    assert registry.handle(state, "!pomodoro 90", MOD) == (
        "@mod Usage: !pomodoro [minutes] (1-60). Example: !pomodoro 25"
    )
    assert "Custom Pomodoro started! 5 minutes" in registry.handle(state, "!pomodoro 5", MOD)
    assert state.core.get_pomodoro_status()["timeLeft"] == 300

    assert "paused" in registry.handle(state, "!pause", MOD)
    assert registry.handle(state, "!pause", MOD) == "@mod No active Pomodoro to pause"
    assert "resumed" in registry.handle(state, "!resume", MOD)
    assert "reset" in registry.handle(state, "!reset", MOD)
    assert registry.handle(state, "!pstatus", MOD) == "@mod Ready for work session 1. Use !pomodoro to start! 💪"


def test_console_context_uses_moderator_list(state: AppState) -> None:
    ctx = console_context(state)
    assert ctx == ChatContext(username="streamer", is_moderator=True)


def test_console_line_swallows_handler_crash(state: AppState) -> None:
    reg = CommandRegistry()

    def boom(state, args, ctx):
        raise RuntimeError("bug")

    reg.register("boom", boom, "crash")
    assert handle_console_line(state, "!boom", ALICE, registry=reg) == "Internal error while handling a command."
