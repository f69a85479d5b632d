# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Scripted random input bound to a single session."""

from __future__ import annotations

import asyncio
import random
import time
from typing import TYPE_CHECKING

import structlog

from afkbot.constants import SPRINT_CONTROL, SPRINT_PROBABILITY
from afkbot.core.timer import PeriodicTimer
from afkbot.errors import ClientError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from afkbot.client.base import GameSession

log = structlog.get_logger()


class ActionLoop:
    """Press a random control every hold period while the session is current.

    The loop captures its session at construction. Every tick first checks
    that this session is still the supervisor's current one (``is_current``)
    and that the entity is live; if not, the tick does nothing. Once the
    session has been superseded no later check can pass again.
    """

    def __init__(
        self,
        session: GameSession,
        *,
        is_current: Callable[[], bool],
        commands: Sequence[str],
        hold_s: float,
        sprint: bool = True,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not commands:
            raise ValueError("commands must not be empty")
        self._session = session
        self._is_current = is_current
        self._commands = tuple(commands)
        self._hold_s = hold_s
        self._sprint = sprint
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._clock = clock
        self._released: asyncio.Event | None = None
        self._timer: PeriodicTimer | None = None
        self.actions_issued = 0
        self.ticks_skipped = 0

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def timer(self) -> PeriodicTimer | None:
        return self._timer

    def is_stale(self) -> bool:
        return not self._is_current()

    def start(self) -> PeriodicTimer:
        """Start ticking every hold period and return the timer handle."""
        if self._timer is None:
            self._timer = PeriodicTimer(self._hold_s, self.tick, name="action-loop")
        self._timer.start()
        log.info("action_loop_started", username=self._session.username, hold_s=self._hold_s)
        return self._timer

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()

    async def tick(self) -> bool:
        """Run one press/hold/release cycle.

        The hold ends one period after the tick fired, however long the press
        took. A tick presses only after the previous tick has released, so a
        release never lands on the next tick's input.

        Returns:
            True if input was issued, False if the tick was skipped
        """
        deadline = self._clock() + self._hold_s
        previous = self._released
        released = self._released = asyncio.Event()
        try:
            if previous is not None:
                await previous.wait()
            return await self._press_and_release(deadline)
        finally:
            released.set()

    async def _press_and_release(self, deadline: float) -> bool:
        session = self._session
        if self.is_stale() or not session.is_live:
            self.ticks_skipped += 1
            return False

        action = self._rng.choice(self._commands)
        sprint = self._sprint and self._rng.random() < SPRINT_PROBABILITY

        try:
            if self._sprint:
                await session.set_input_state(SPRINT_CONTROL, sprint)
            await session.set_input_state(action, True)
        except ClientError as e:
            log.warning("action_failed", action=action, error=str(e))
            return False
        self.actions_issued += 1
        log.debug("action_pressed", action=action, sprint=sprint)

        await self._sleep(max(0.0, deadline - self._clock()))

        # Session may have been replaced while we were holding.
        if self.is_stale():
            log.debug("action_release_skipped", action=action)
            return True
        try:
            await session.clear_input_states()
        except ClientError as e:
            log.warning("action_release_failed", action=action, error=str(e))
        return True
