# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Reference driver for servers speaking a newline-delimited text protocol.

Client to server::

    HELLO <username> <version>
    INPUT <action> 1|0
    CLEAR

Server to client::

    LOGIN            -> login event
    SPAWN            -> entity live, ready event
    DEATH            -> entity no longer live
    KICK <reason>    -> kicked event
    ERROR <message>  -> error event

End of stream (or a reset) ends the session.
"""

from __future__ import annotations

import asyncio
import contextlib
import socket
from typing import TYPE_CHECKING

import structlog

from afkbot.client.base import GameClient, GameSession, SessionEvent
from afkbot.errors import ProbeError, SessionError

if TYPE_CHECKING:
    from asyncio import StreamReader, StreamWriter

log = structlog.get_logger()

ENCODING = "utf-8"


class LineSession(GameSession):
    """Session over an asyncio stream pair."""

    def __init__(self, reader: StreamReader, writer: StreamWriter, username: str) -> None:
        super().__init__(username)
        self._reader = reader
        self._writer = writer
        self._live = False
        self._closed = False
        self._ended = False
        self._reader_task: asyncio.Task[None] | None = None

    @property
    def is_live(self) -> bool:
        return self._live and not self._closed

    def start(self) -> None:
        if self._reader_task is not None or self._closed:
            return
        self._reader_task = asyncio.create_task(self._reader_loop())

    async def send_line(self, line: str) -> None:
        if self._closed or self._writer.is_closing():
            raise SessionError("Not connected")
        try:
            self._writer.write(line.encode(ENCODING) + b"\n")
            await self._writer.drain()
        except (ConnectionResetError, BrokenPipeError) as e:
            raise SessionError("Send failed") from e

    async def set_input_state(self, action: str, active: bool) -> None:
        await self.send_line(f"INPUT {action} {1 if active else 0}")

    async def clear_input_states(self) -> None:
        await self.send_line("CLEAR")

    async def terminate(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._live = False

        task = self._reader_task
        self._reader_task = None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        try:
            self._writer.close()
            await self._writer.wait_closed()
        except (ConnectionResetError, BrokenPipeError, RuntimeError):
            pass
        log.debug("line_session_closed", username=self.username)
        self._finish()

    async def _reader_loop(self) -> None:
        try:
            while True:
                raw = await self._reader.readline()
                if not raw:
                    break
                self._handle_line(raw.decode(ENCODING, errors="replace").strip())
        except (ConnectionResetError, BrokenPipeError) as e:
            self.emit(SessionEvent.ERROR, SessionError(f"Connection lost: {e}"))
        finally:
            self._live = False
            self._finish()

    def _handle_line(self, line: str) -> None:
        if not line:
            return
        command, _, rest = line.partition(" ")
        command = command.upper()
        if command == "LOGIN":
            self.emit(SessionEvent.LOGIN)
        elif command == "SPAWN":
            self._live = True
            self.emit(SessionEvent.READY)
        elif command == "DEATH":
            self._live = False
        elif command == "KICK":
            self.emit(SessionEvent.KICKED, rest)
        elif command == "ERROR":
            self.emit(SessionEvent.ERROR, SessionError(rest or "server error"))
        else:
            log.debug("line_ignored", line=line)

    def _finish(self) -> None:
        if self._ended:
            return
        self._ended = True
        self.emit(SessionEvent.END)


class LineGameClient(GameClient):
    """Client for the line protocol."""

    async def probe(self, host: str, port: int, timeout: float) -> None:
        try:
            _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=timeout)
        except TimeoutError as e:
            raise ProbeError(f"Probe to {host}:{port} timed out") from e
        except OSError as e:
            raise ProbeError(f"Probe to {host}:{port} failed: {e}") from e

        writer.close()
        with contextlib.suppress(ConnectionResetError, BrokenPipeError):
            await writer.wait_closed()

    async def establish_session(
        self,
        host: str,
        port: int,
        *,
        username: str,
        version: str,
        connect_timeout: float,
        keep_alive: bool = True,
    ) -> LineSession:
        try:
            reader, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=connect_timeout)
        except TimeoutError as e:
            raise SessionError(f"Connection timeout to {host}:{port}") from e
        except OSError as e:
            raise SessionError(f"Failed to connect to {host}:{port}: {e}") from e

        if keep_alive:
            sock = writer.get_extra_info("socket")
            if sock is not None:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)

        session = LineSession(reader, writer, username=username)
        try:
            await session.send_line(f"HELLO {username} {version}")
        except BaseException:
            writer.close()
            raise
        log.info("line_connected", host=host, port=port, username=username, version=version)
        return session
