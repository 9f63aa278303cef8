# src/taskodoro/pomodoro/pomodoro_ticker.py

"""
Pomodoro ticker.

A small loop that calls core.tick() once per interval in a worker thread,
independent of any request handling. Ticks are scheduled against a monotonic
deadline so slow iterations do not accumulate drift; if the loop falls behind
by more than one interval it skips ahead instead of bursting.

To stop the ticker, cancel the coroutine/task.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Protocol

logger = logging.getLogger(__name__)


class Tickable(Protocol):
    def tick(self) -> object: ...


async def run_pomodoro_ticker(core: Tickable, *, interval_seconds: float = 1.0) -> None:
    interval = max(0.001, float(interval_seconds))
    next_at = time.monotonic() + interval
    logger.info("Pomodoro ticker started (interval=%.3fs)", interval)

    try:
        while True:
            delay = next_at - time.monotonic()
            if delay > 0:
                await asyncio.sleep(delay)

            try:
                # tick takes the core lock and may write the snapshot file
                await asyncio.to_thread(core.tick)
            except Exception:
                logger.exception("Pomodoro tick failed")

            next_at += interval
            now = time.monotonic()
            if now - next_at > interval:
                logger.warning("Pomodoro ticker fell behind by %.2fs; skipping ahead", now - next_at)
                next_at = now + interval
    finally:
        logger.info("Pomodoro ticker stopped")
