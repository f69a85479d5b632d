# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Connection lifecycle: reachability polling, session wiring, reconnect backoff."""

from __future__ import annotations

import asyncio
import random
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel

from afkbot.client.base import SessionEvent
from afkbot.core.action_loop import ActionLoop
from afkbot.core.backoff import Backoff
from afkbot.errors import is_timeout_error

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine

    from afkbot.client.base import GameClient, GameSession
    from afkbot.config import BotConfig

log = structlog.get_logger()


class Phase(str, Enum):
    IDLE = "idle"
    REACHABILITY_CHECK = "reachability_check"
    CONNECTING = "connecting"
    LOGGED_IN = "logged_in"
    READY = "ready"
    ENDED = "ended"


class SupervisorStatus(BaseModel):
    phase: Phase
    generation: int
    backoff_ms: int
    reconnecting: bool
    connected: bool
    live: bool


class Supervisor:
    """Keeps exactly one session alive, reconnecting forever with backoff.

    All state is touched from the event loop thread only. Each established
    session gets a new generation number; the action loop of an older
    generation can never act again, even if a driver reuses session objects.
    """

    def __init__(
        self,
        config: BotConfig,
        client: GameClient,
        *,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._client = client
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._backoff = Backoff(config.action.retry_delay, config.action.max_retry_delay)
        self._reconnecting = False
        self._current: GameSession | None = None
        self._generation = 0
        self._action_loop: ActionLoop | None = None
        self._phase = Phase.IDLE
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False
        self._stopped = asyncio.Event()

    @property
    def backoff(self) -> Backoff:
        return self._backoff

    @property
    def current(self) -> GameSession | None:
        return self._current

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def reconnecting(self) -> bool:
        return self._reconnecting

    @property
    def action_loop(self) -> ActionLoop | None:
        return self._action_loop

    def is_current(self, session: GameSession, generation: int) -> bool:
        return self._current is session and self._generation == generation

    def status(self) -> SupervisorStatus:
        session = self._current
        return SupervisorStatus(
            phase=self._phase,
            generation=self._generation,
            backoff_ms=self._backoff.current_ms,
            reconnecting=self._reconnecting,
            connected=session is not None,
            live=session is not None and session.is_live,
        )

    async def run(self) -> None:
        """Connect and keep reconnecting until :meth:`close` is called."""
        self._spawn(self.connect())
        await self._stopped.wait()

    async def close(self) -> None:
        """Stop reconnecting and tear down the current session."""
        if self._closed:
            return
        self._closed = True
        current = asyncio.current_task()
        pending = [task for task in self._tasks if task is not current and not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        if self._action_loop is not None and self._action_loop.timer is not None:
            await self._action_loop.timer.aclose()
        await self.cleanup()
        self._phase = Phase.IDLE
        self._stopped.set()
        log.info("supervisor_closed")

    async def wait_for_reachable(self, host: str, port: int) -> None:
        """Poll the server status until it answers. Never gives up."""
        client_cfg = self._config.client
        self._phase = Phase.REACHABILITY_CHECK
        attempt = 0
        while True:
            attempt += 1
            try:
                await self._client.probe(host, port, client_cfg.probe_timeout_s)
            except Exception as e:
                log.warning(
                    "server_unreachable",
                    host=host,
                    port=port,
                    attempt=attempt,
                    retry_in_s=client_cfg.probe_interval_s,
                    error=str(e),
                )
                await self._sleep(client_cfg.probe_interval_s)
                continue
            log.info("server_reachable", host=host, port=port, attempts=attempt)
            return

    async def connect(self) -> None:
        """Establish a new session; failures are routed into the reconnect path."""
        self._reconnecting = False
        if self._closed:
            return
        if self._current is not None:
            log.warning("connect_skipped", reason="session already active", generation=self._generation)
            return

        client_cfg = self._config.client
        await self.wait_for_reachable(client_cfg.host, client_cfg.port)

        self._phase = Phase.CONNECTING
        log.info(
            "session_connecting",
            host=client_cfg.host,
            port=client_cfg.port,
            username=client_cfg.username,
            version=client_cfg.version,
        )
        try:
            session = await asyncio.wait_for(
                self._client.establish_session(
                    client_cfg.host,
                    client_cfg.port,
                    username=client_cfg.username,
                    version=client_cfg.version,
                    connect_timeout=client_cfg.connect_timeout_s,
                    keep_alive=client_cfg.keep_alive,
                ),
                timeout=client_cfg.connect_timeout_s,
            )
        except Exception as e:
            self._phase = Phase.ENDED
            self._log_failure("connect_failed", e)
            self._spawn(self.schedule_reconnect())
            return

        if self._closed:
            await session.terminate()
            return

        self._generation += 1
        self._current = session
        self._wire(session, self._generation)
        session.start()
        log.info("session_established", generation=self._generation)

    async def cleanup(self) -> None:
        """Stop the action timer and drop the current session. Idempotent."""
        if self._action_loop is not None:
            self._action_loop.cancel()
            self._action_loop = None

        session = self._current
        if session is None:
            return
        session.remove_all_listeners()
        self._current = None
        try:
            await session.terminate()
        except Exception as e:
            log.warning("session_terminate_failed", error=str(e))

    async def schedule_reconnect(self) -> None:
        """Wait out the backoff, then connect again. At most one cycle runs at a time."""
        if self._reconnecting or self._closed:
            return
        self._reconnecting = True

        delay_s = self._backoff.current_s
        log.info("reconnect_scheduled", delay_s=delay_s)
        await self.cleanup()
        await self._sleep(delay_s)
        self._backoff.advance()
        await self.connect()

    def _wire(self, session: GameSession, generation: int) -> None:
        def current() -> bool:
            return self.is_current(session, generation)

        def on_login(*_: Any) -> None:
            if not current():
                return
            self._phase = Phase.LOGGED_IN
            self._backoff.reset()
            log.info("logged_in", username=session.username, generation=generation)

        def on_ready(*_: Any) -> None:
            if not current():
                return
            self._phase = Phase.READY
            self._start_action_loop(session, current)

        def on_kicked(reason: Any = None, *_: Any) -> None:
            log.warning("kicked", reason=str(reason), generation=generation)

        def on_error(err: Any = None, *_: Any) -> None:
            if isinstance(err, BaseException):
                self._log_failure("session_error", err)
            else:
                log.error("session_error", error=str(err), generation=generation)

        def on_end(*_: Any) -> None:
            if not current():
                return
            self._phase = Phase.ENDED
            log.info("session_ended", generation=generation)
            self._spawn(self.schedule_reconnect())

        session.on(SessionEvent.LOGIN, on_login)
        session.on(SessionEvent.READY, on_ready)
        session.on(SessionEvent.KICKED, on_kicked)
        session.on(SessionEvent.ERROR, on_error)
        session.on(SessionEvent.END, on_end)

    def _start_action_loop(self, session: GameSession, is_current: Callable[[], bool]) -> None:
        # Respawns fire ready again; keep a single timer.
        if self._action_loop is not None:
            self._action_loop.cancel()

        action_cfg = self._config.action
        self._action_loop = ActionLoop(
            session,
            is_current=is_current,
            commands=action_cfg.commands,
            hold_s=action_cfg.hold_duration_s,
            sprint=action_cfg.sprint,
            rng=self._rng,
        )
        self._action_loop.start()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("supervisor_task_failed", error=str(exc))

    @staticmethod
    def _log_failure(event: str, err: BaseException) -> None:
        if is_timeout_error(err):
            log.warning(event, error=str(err), error_type=type(err).__name__, timeout=True)
        else:
            log.error(event, error=str(err), error_type=type(err).__name__)
