# src/taskodoro/realtime/broadcaster.py

"""
Socket.IO fan-out.

publish() may be called from any thread (console REPL, HTTP handlers, the
ticker). It only enqueues; a single pump task on the server loop emits events
one by one, so subscribers see mutations in the order they were applied.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass
from typing import Any, Protocol

from ..core.effects import Event

logger = logging.getLogger(__name__)


class Emitter(Protocol):
    """The part of socketio.AsyncServer we use."""

    async def emit(self, event: str, data: Any = None, to: str | None = None) -> Any: ...


@dataclass(slots=True, frozen=True)
class _Outgoing:
    event: Event
    to: str | None


class SocketBroadcaster:
    def __init__(self, sio: Emitter) -> None:
        self._sio = sio
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue[_Outgoing] | None = None
        self._pump: asyncio.Task[None] | None = None
        self._attach_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._pump is not None and not self._pump.done()

    async def start(self) -> None:
        """Bind to the running loop and start the pump."""
        with self._attach_lock:
            self._loop = asyncio.get_running_loop()
            self._queue = asyncio.Queue()
            self._pump = asyncio.create_task(self._run(self._queue), name="socket-broadcaster")
        logger.info("Socket broadcaster started")

    async def stop(self) -> None:
        with self._attach_lock:
            pump, self._pump = self._pump, None
            self._loop = None
            self._queue = None
        if pump is not None:
            pump.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pump
        logger.info("Socket broadcaster stopped")

    def publish(self, event: Event, to: str | None = None) -> None:
        with self._attach_lock:
            loop, queue = self._loop, self._queue
        if loop is None or queue is None or loop.is_closed():
            logger.debug("No server loop attached; dropping event %s", event.name)
            return

        # One path for every thread: callbacks run in the order they were scheduled.
        try:
            loop.call_soon_threadsafe(queue.put_nowait, _Outgoing(event=event, to=to))
        except RuntimeError:
            logger.debug("Server loop closed; dropping event %s", event.name)

    async def _run(self, queue: asyncio.Queue[_Outgoing]) -> None:
        while True:
            item = await queue.get()
            try:
                await self._sio.emit(item.event.name, item.event.payload, to=item.to)
            except Exception:
                logger.exception("Failed to emit %s", item.event.name)
            finally:
                queue.task_done()

    async def drain(self) -> None:
        """Wait until everything queued so far has been emitted."""
        queue = self._queue
        if queue is not None:
            # let already scheduled put_nowait callbacks land first
            await asyncio.sleep(0)
            await queue.join()
