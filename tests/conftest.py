# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest
import structlog

from afkbot.config import BotConfig

from .fakes import FakeClient, RecordingSleep

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo configure_logging calls made by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def raw_config() -> dict[str, Any]:
    """Config mapping in config.json form."""
    return {
        "client": {
            "host": "127.0.0.1",
            "port": 25565,
            "username": "AFKBot",
            "version": "1.20.4",
            "probeInterval": 10000,
            "connectTimeout": 60000,
        },
        "action": {
            "commands": ["forward", "back", "left", "right"],
            "holdDuration": 60000,
            "retryDelay": 5000,
            "maxRetryDelay": 120000,
        },
    }


@pytest.fixture
def bot_config(raw_config: dict[str, Any]) -> BotConfig:
    return BotConfig.from_mapping(raw_config)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def config_file(tmp_path: Path, raw_config: dict[str, Any]) -> Path:
    """config.json written to a temporary directory."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(raw_config))
    return path
