# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cancellable periodic timer."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = structlog.get_logger()


class PeriodicTimer:
    """Fire a coroutine callback every *interval_s* seconds.

    Interval semantics: each firing runs as its own task, so a slow callback
    never delays the next one. :meth:`cancel` stops future firings and leaves
    callbacks already running to finish; :meth:`aclose` also cancels those.
    """

    def __init__(self, interval_s: float, callback: Callable[[], Awaitable[object]], *, name: str = "timer") -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self._interval_s = interval_s
        self._callback = callback
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[object]] = set()
        self._fired = 0

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def fired(self) -> int:
        return self._fired

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def start(self) -> None:
        if self.active:
            return
        self._task = asyncio.create_task(self._loop(), name=self._name)

    def cancel(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None

    async def aclose(self) -> None:
        task = self._task
        self.cancel()
        pending = [t for t in (task, *self._in_flight) if t is not None and not t.done()]
        for t in pending:
            t.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval_s)
            self._fired += 1
            task = asyncio.create_task(self._callback())
            self._in_flight.add(task)
            task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[object]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("timer_callback_failed", timer=self._name, error=str(exc))
