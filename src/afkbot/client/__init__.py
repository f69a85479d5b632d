# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Game client drivers."""

from __future__ import annotations

import importlib

from afkbot.client.base import GameClient, GameSession, SessionEvent
from afkbot.client.line import LineGameClient, LineSession
from afkbot.errors import ConfigError

__all__ = [
    "GameClient",
    "GameSession",
    "LineGameClient",
    "LineSession",
    "SessionEvent",
    "load_client",
]


def load_client(driver: str) -> GameClient:
    """Build the client named by ``client.driver``.

    Args:
        driver: ``"line"`` or an import path ``"package.module:attr"`` naming a
            GameClient subclass or a zero-argument factory returning one

    Raises:
        ConfigError: If the driver cannot be resolved
    """
    if driver == "line":
        return LineGameClient()

    module_name, sep, attr = driver.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"Unknown driver: {driver}")

    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"Cannot load driver {driver}: {e}") from e

    if not callable(factory):
        raise ConfigError(f"Driver {driver} is not callable")
    client = factory()
    if not isinstance(client, GameClient):
        raise ConfigError(f"Driver {driver} did not produce a GameClient")
    return client
