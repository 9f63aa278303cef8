# src/taskodoro/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import ChatContext, CommandRegistry
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def console_context(state: AppState) -> ChatContext:
    settings = state.settings
    user = str(getattr(settings, "console_user", "streamer") or "streamer").lower()
    mods = {m.lower() for m in (getattr(settings, "moderators", None) or [])}
    return ChatContext(username=user, is_moderator=user in mods)


def handle_console_line(
    state: AppState,
    line: str,
    ctx: ChatContext,
    registry: CommandRegistry = command_registry,
) -> str | None:
    """One chat line from the console; returns the reply to print (if any)."""
    try:
        return registry.handle(state, line, ctx)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


def run_console_loop(state: AppState) -> None:
    """
    Local chat stand-in: each line is treated as a chat message from the
    configured console user. /exit or /quit ends the loop.
    """
    ctx = console_context(state)
    logger.info("Console connector started (user=%s moderator=%s).", ctx.username, ctx.is_moderator)
    _print_ts(f"[CONSOLE] Chatting as {ctx.username}. Try !taskhelp or !pomohelp. Use /exit to quit.\n")

    while True:
        try:
            line = input(f"{ctx.username}> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_console_line(state, line, ctx)
        if reply is None:
            _print_ts(f"(not a command: {line})")
        else:
            _print_ts(reply)

    logger.info("Console connector finished.")
