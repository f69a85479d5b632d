"""Mock line-protocol game server for testing."""

from __future__ import annotations

import asyncio
from typing import Any


class MockGameServer:
    """Greets each client with scripted lines and records what it sends."""

    def __init__(self, host: str = "127.0.0.1", port: int = 0) -> None:
        """Initialize mock server.

        Args:
            host: Host to bind to
            port: Port to bind to (0 = random available port)
        """
        self.host = host
        self.port = port
        self.server: asyncio.Server | None = None
        self.scripts: list[list[str]] = []
        self.close_after_script: list[bool] = []
        self.received: list[list[str]] = []
        self.connections = 0
        self.sessions = 0
        self._writers: list[asyncio.StreamWriter] = []

    def add_script(self, lines: list[str], close: bool = False) -> None:
        """Queue the lines sent to the next connecting client."""
        self.scripts.append(lines)
        self.close_after_script.append(close)

    async def start(self) -> None:
        self.server = await asyncio.start_server(self._handle_client, self.host, self.port)
        self.port = self.server.sockets[0].getsockname()[1]

    async def stop(self) -> None:
        for writer in list(self._writers):
            writer.close()
        if self.server:
            self.server.close()
            await self.server.wait_closed()

    def all_received(self) -> list[str]:
        return [line for lines in self.received for line in lines]

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.connections += 1
        self._writers.append(writer)

        try:
            # Probes connect and close without a greeting.
            hello = await reader.readline()
            if not hello:
                return
            index = self.sessions
            self.sessions += 1
            received = [hello.decode().strip()]
            self.received.append(received)

            script = self.scripts[index] if index < len(self.scripts) else []
            close = self.close_after_script[index] if index < len(self.close_after_script) else False
            for line in script:
                writer.write(line.encode() + b"\n")
            await writer.drain()
            if close:
                return

            while True:
                data = await reader.readline()
                if not data:
                    break
                received.append(data.decode().strip())
        except (ConnectionResetError, BrokenPipeError):
            pass
        finally:
            self._writers.remove(writer)
            writer.close()


class MockGame:
    """Context manager for the mock game server."""

    def __init__(self, *scripts: list[str], close: bool = False) -> None:
        self.server = MockGameServer()
        for script in scripts:
            self.server.add_script(script, close=close)

    async def __aenter__(self) -> MockGameServer:
        await self.server.start()
        return self.server

    async def __aexit__(self, *args: Any) -> None:
        await self.server.stop()
