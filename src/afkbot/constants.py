# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared constants for afkbot."""

from __future__ import annotations

# Connection target
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 25565
DEFAULT_USERNAME = "AFKBot"
DEFAULT_VERSION = "1.20.4"
DEFAULT_DRIVER = "line"

# Timeouts and intervals (milliseconds, as in the config file)
DEFAULT_CONNECT_TIMEOUT_MS = 60_000
DEFAULT_PROBE_TIMEOUT_MS = 5_000
DEFAULT_PROBE_INTERVAL_MS = 10_000

# Action loop
DEFAULT_COMMANDS = ("forward", "back", "left", "right", "jump")
DEFAULT_HOLD_DURATION_MS = 3_000
SPRINT_CONTROL = "sprint"
SPRINT_PROBABILITY = 0.5

# Reconnect backoff
DEFAULT_RETRY_DELAY_MS = 5_000
DEFAULT_MAX_RETRY_DELAY_MS = 120_000
BACKOFF_MULTIPLIER = 2

CONFIG_FILENAMES = ("config.json", "config.yaml", "config.yml")
