"""In-memory game client used by the supervisor and action loop tests."""

from __future__ import annotations

import asyncio
from typing import Any

from afkbot.client.base import GameClient, GameSession
from afkbot.errors import ProbeError, SessionError


class FakeSession(GameSession):
    """Session that records every control call."""

    def __init__(self, username: str = "AFKBot", live: bool = True) -> None:
        super().__init__(username)
        self.live = live
        self.inputs: list[tuple[str, bool]] = []
        self.clears = 0
        self.terminated = 0
        self.started = False
        self.fail_input = False

    @property
    def is_live(self) -> bool:
        return self.live and not self.terminated

    def start(self) -> None:
        self.started = True

    async def set_input_state(self, action: str, active: bool) -> None:
        if self.fail_input:
            raise SessionError("Not connected")
        self.inputs.append((action, active))

    async def clear_input_states(self) -> None:
        self.clears += 1

    async def terminate(self) -> None:
        self.terminated += 1


class FakeClient(GameClient):
    """Client with scripted probe failures and establish errors."""

    def __init__(self, probe_failures: int = 0, establish_errors: list[BaseException] | None = None) -> None:
        self.probe_failures = probe_failures
        self.establish_errors = list(establish_errors or [])
        self.probe_calls = 0
        self.establish_calls: list[dict[str, Any]] = []
        self.sessions: list[FakeSession] = []
        self.hang = False

    async def probe(self, host: str, port: int, timeout: float) -> None:
        self.probe_calls += 1
        if self.probe_failures < 0 or self.probe_calls <= self.probe_failures:
            raise ProbeError(f"Probe to {host}:{port} failed")

    async def establish_session(
        self,
        host: str,
        port: int,
        *,
        username: str,
        version: str,
        connect_timeout: float,
        keep_alive: bool = True,
    ) -> FakeSession:
        self.establish_calls.append(
            {
                "host": host,
                "port": port,
                "username": username,
                "version": version,
                "connect_timeout": connect_timeout,
                "keep_alive": keep_alive,
            }
        )
        if self.hang:
            await asyncio.Event().wait()
        if self.establish_errors:
            raise self.establish_errors.pop(0)
        session = FakeSession(username)
        self.sessions.append(session)
        return session


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays and only yields."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)
        await asyncio.sleep(0)


async def settle(supervisor: Any, rounds: int = 200) -> None:
    """Run the supervisor's background tasks until none are left."""
    for _ in range(rounds):
        tasks = list(supervisor._tasks)
        if not tasks:
            return
        await asyncio.gather(*tasks, return_exceptions=True)
    raise AssertionError("supervisor did not settle")


async def wait_until(predicate: Any, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)
