# src/taskodoro/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..core.state import AppState
from ..errors import CoreError

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "!"
MAX_POMODORO_MINUTES = 60
MYTASKS_TEXT_PREVIEW = 30


@dataclass(slots=True, frozen=True)
class ChatContext:
    """Who sent the chat line. is_moderator covers broadcaster and mods."""

    username: str
    is_moderator: bool = False


CommandHandler = Callable[[AppState, list[str], ChatContext], str]


class CommandRegistry:
    """Chat command registry (!add, !pomodoro, ...) with alias support."""

    def __init__(self, prefix: str = COMMAND_PREFIX) -> None:
        self.prefix = prefix
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

    def handle(self, state: AppState, line: str, ctx: ChatContext) -> str | None:
        """
        Handle a string like "!command args".
        Returns a reply string or None if the line is not a known command
        (chat is full of other bots' commands; unknown ones stay silent).
        """
        if not line.startswith(self.prefix):
            return None

        parts = line[len(self.prefix):].split()
        if not parts:
            return None

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return None

        logger.info("Executing command %s by %s", name, ctx.username)
        try:
            return handler(state, args, ctx)
        except CoreError as e:
            logger.info("Command %s rejected for %s: %s", name, ctx.username, e.message)
            return f"@{ctx.username} {e.message}"

    def build_help(self) -> str:
        return " | ".join(f"{self.prefix}{name} - {text}" for name, text in self._help.items())


registry = CommandRegistry()


def _parse_task_id(raw: str) -> int | None:
    try:
        task_id = int(raw)
    except ValueError:
        return None
    return task_id if task_id > 0 else None


def _mmss(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"


# ---- tasks ----


def cmd_add(state: AppState, args: list[str], ctx: ChatContext) -> str:
    text = " ".join(args).strip()
    if not text:
        return f"@{ctx.username} Usage: !add <task description>"
    task = state.core.create_task(text, ctx.username)
    return f'@{ctx.username} Task added: "{task["text"]}" (ID: {task["id"]})'


def cmd_edit(state: AppState, args: list[str], ctx: ChatContext) -> str:
    if len(args) < 2:
        return f"@{ctx.username} Usage: !edit <task_id> <new description>"
    task_id = _parse_task_id(args[0])
    if task_id is None:
        return f"@{ctx.username} Please provide a valid task ID"
    task = state.core.update_task(task_id, " ".join(args[1:]), ctx.username)
    return f'@{ctx.username} Task {task_id} updated: "{task["text"]}"'


def cmd_done(state: AppState, args: list[str], ctx: ChatContext) -> str:
    task_id = _parse_task_id(args[0]) if args else None
    if task_id is None:
        return f"@{ctx.username} Usage: !done <task_id>"
    state.core.complete_task(task_id, ctx.username)
    return f"@{ctx.username} Task {task_id} marked as completed! ✅"


def cmd_delete(state: AppState, args: list[str], ctx: ChatContext) -> str:
    task_id = _parse_task_id(args[0]) if args else None
    if task_id is None:
        return f"@{ctx.username} Usage: !delete <task_id>"
    task = state.core.delete_task(task_id, ctx.username)
    return f'@{ctx.username} Task {task_id} deleted: "{task["text"]}"'


def cmd_mytasks(state: AppState, args: list[str], ctx: ChatContext) -> str:
    tasks = state.core.tasks_for_user(ctx.username)
    if not tasks:
        return f"@{ctx.username} You have no tasks."

    pending = [t for t in tasks if t["status"] == "pending"]
    done = [t for t in tasks if t["status"] == "done"]

    msg = f"@{ctx.username} Your tasks: "
    if pending:
        items = []
        for t in pending:
            text = t["text"]
            if len(text) > MYTASKS_TEXT_PREVIEW:
                text = text[:MYTASKS_TEXT_PREVIEW] + "..."
            items.append(f"{t['id']}: {text}")
        msg += "Pending: " + ", ".join(items)
    if done:
        msg += f" | Completed: {len(done)}"
    return msg


def cmd_cleardone(state: AppState, args: list[str], ctx: ChatContext) -> str:
    if not ctx.is_moderator:
        return f"@{ctx.username} Only the broadcaster or moderators can clear completed tasks."
    removed = state.core.clear_completed_tasks()
    return f"@{ctx.username} Cleared {len(removed)} completed tasks"


def cmd_taskhelp(state: AppState, args: list[str], ctx: ChatContext) -> str:
    return (
        f"@{ctx.username} Task commands: !add <description> | !edit <id> <new description> "
        "| !done <id> | !delete <id> | !mytasks | !taskhelp"
    )


# ---- pomodoro ----


def cmd_pomodoro(state: AppState, args: list[str], ctx: ChatContext) -> str:
    """
    !pomodoro            -> 25-minute work session
    !pomodoro <minutes>  -> custom length (1-60)
    """
    if not args:
        state.core.start_pomodoro(ctx.username)
        return f"@{ctx.username} 🍅 Pomodoro started! 25 minutes of focused work time. Good luck! ✨"

    try:
        minutes = int(args[0])
    except ValueError:
        minutes = 0
    if not 0 < minutes <= MAX_POMODORO_MINUTES:
        return f"@{ctx.username} Usage: !pomodoro [minutes] (1-60). Example: !pomodoro 25"

    state.core.start_pomodoro(ctx.username, minutes)
    return (
        f"@{ctx.username} 🍅 Custom Pomodoro started! "
        f"{minutes} minutes of focused work time. Let's go! 💪"
    )


def cmd_pause(state: AppState, args: list[str], ctx: ChatContext) -> str:
    state.core.pause_pomodoro(ctx.username)
    return f"@{ctx.username} ⏸️ Pomodoro paused. Use !resume to continue or !reset to start over."


def cmd_resume(state: AppState, args: list[str], ctx: ChatContext) -> str:
    state.core.resume_pomodoro(ctx.username)
    return f"@{ctx.username} ▶️ Pomodoro resumed! Keep up the great work! 🔥"


def cmd_reset(state: AppState, args: list[str], ctx: ChatContext) -> str:
    state.core.reset_pomodoro(ctx.username)
    return f"@{ctx.username} 🔄 Pomodoro reset! Ready for a fresh start when you are."


def cmd_pstatus(state: AppState, args: list[str], ctx: ChatContext) -> str:
    st = state.core.get_pomodoro_status()
    remaining = _mmss(st["timeLeft"])
    session = st["session"]

    if st["isActive"]:
        if st["mode"] == "work":
            break_text = "15-min long break" if st["nextBreakType"] == "long" else "10-min break"
            return f"@{ctx.username} 🍅 Work session {session}: {remaining} remaining → then {break_text}"
        return f"@{ctx.username} ☕ Break time: {remaining} remaining → then work session {session}"

    if st["mode"] == "work":
        return f"@{ctx.username} Ready for work session {session}. Use !pomodoro to start! 💪"
    return f"@{ctx.username} ⏸️ Break paused at {remaining}. Use !resume to continue."


def cmd_pomohelp(state: AppState, args: list[str], ctx: ChatContext) -> str:
    return (
        f"@{ctx.username} Pomodoro commands: !pomodoro [minutes] | !pause | !resume "
        "| !reset | !pstatus | !pomohelp"
    )


def cmd_help(state: AppState, args: list[str], ctx: ChatContext) -> str:
    return f"@{ctx.username} {registry.build_help()}"


registry.register("add", cmd_add, help_text="Add a task.")
registry.register("edit", cmd_edit, help_text="Edit your task.")
registry.register("done", cmd_done, help_text="Mark your task as done.")
registry.register("delete", cmd_delete, help_text="Delete your task.", aliases=["remove"])
registry.register("mytasks", cmd_mytasks, help_text="List your tasks.")
registry.register("cleardone", cmd_cleardone, help_text="Clear completed tasks (mods).")
registry.register("taskhelp", cmd_taskhelp, help_text="Task command help.")
registry.register("pomodoro", cmd_pomodoro, help_text="Start a Pomodoro.", aliases=["pomo"])
registry.register("pause", cmd_pause, help_text="Pause the Pomodoro.")
registry.register("resume", cmd_resume, help_text="Resume the Pomodoro.")
registry.register("reset", cmd_reset, help_text="Reset the Pomodoro.")
registry.register("pstatus", cmd_pstatus, help_text="Pomodoro status.")
registry.register("pomohelp", cmd_pomohelp, help_text="Pomodoro command help.")
registry.register("help", cmd_help, help_text="Show available commands.")
