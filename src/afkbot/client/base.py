# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Abstract game client contract consumed by the supervisor."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

log = structlog.get_logger()


class SessionEvent(str, Enum):
    """Lifecycle events a session can emit."""

    LOGIN = "login"
    READY = "ready"
    KICKED = "kicked"
    END = "end"
    ERROR = "error"


class GameSession(ABC):
    """One established connection to a game server.

    Drivers deliver lifecycle events through :meth:`emit`. Handlers run on the
    event loop thread in registration order; a failing handler is logged and
    does not stop the others.
    """

    def __init__(self, username: str) -> None:
        self.username = username
        self._handlers: dict[SessionEvent, list[Callable[..., None]]] = {}

    def on(self, event: SessionEvent, handler: Callable[..., None]) -> None:
        """Register *handler* for *event*."""
        self._handlers.setdefault(SessionEvent(event), []).append(handler)

    def remove_all_listeners(self) -> None:
        """Detach every registered handler."""
        self._handlers.clear()

    def listener_count(self, event: SessionEvent) -> int:
        return len(self._handlers.get(SessionEvent(event), ()))

    def emit(self, event: SessionEvent, *args: Any) -> None:
        for handler in list(self._handlers.get(SessionEvent(event), ())):
            try:
                handler(*args)
            except Exception as exc:
                log.warning("session_handler_failed", event=SessionEvent(event).value, error=str(exc))

    def start(self) -> None:
        """Begin delivering events.

        Called once all handlers are registered. Drivers that need a reader
        pump start it here so no event can fire before handlers exist.
        """

    @property
    @abstractmethod
    def is_live(self) -> bool:
        """True while the player entity is materialized in the world."""

    @abstractmethod
    async def set_input_state(self, action: str, active: bool) -> None:
        """Press or release a control.

        Raises:
            SessionError: If the session is no longer connected
        """

    @abstractmethod
    async def clear_input_states(self) -> None:
        """Release every control.

        Raises:
            SessionError: If the session is no longer connected
        """

    @abstractmethod
    async def terminate(self) -> None:
        """Close the session.

        Should be idempotent - safe to call multiple times.
        """


class GameClient(ABC):
    """Factory for sessions plus a lightweight reachability probe."""

    @abstractmethod
    async def probe(self, host: str, port: int, timeout: float) -> None:
        """Check that the server answers a status query.

        Never performs a login.

        Raises:
            ProbeError: If the server does not answer within *timeout* seconds
        """

    @abstractmethod
    async def establish_session(
        self,
        host: str,
        port: int,
        *,
        username: str,
        version: str,
        connect_timeout: float,
        keep_alive: bool = True,
    ) -> GameSession:
        """Open a new session.

        Args:
            host: Server hostname or IP address
            port: Server port
            username: Player name to log in as
            version: Game protocol version string
            connect_timeout: Connection timeout in seconds
            keep_alive: Enable transport keep-alive

        Raises:
            SessionError: If the connection fails
        """
