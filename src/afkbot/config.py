# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Bot configuration models and file loading.

Keys follow the camelCase names used in ``config.json`` (``holdDuration``,
``retryDelay``...); snake_case names are accepted as well. All durations are
in milliseconds.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from afkbot.constants import (
    DEFAULT_COMMANDS,
    DEFAULT_CONNECT_TIMEOUT_MS,
    DEFAULT_DRIVER,
    DEFAULT_HOLD_DURATION_MS,
    DEFAULT_HOST,
    DEFAULT_MAX_RETRY_DELAY_MS,
    DEFAULT_PORT,
    DEFAULT_PROBE_INTERVAL_MS,
    DEFAULT_PROBE_TIMEOUT_MS,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_USERNAME,
    DEFAULT_VERSION,
)
from afkbot.errors import ConfigError

log = structlog.get_logger()


class ClientConfig(BaseModel):
    """Connection target and identity."""

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    username: str = DEFAULT_USERNAME
    version: str = DEFAULT_VERSION
    driver: str = DEFAULT_DRIVER
    keep_alive: bool = Field(default=True, alias="keepAlive")
    connect_timeout: int = Field(default=DEFAULT_CONNECT_TIMEOUT_MS, gt=0, alias="connectTimeout")
    probe_timeout: int = Field(default=DEFAULT_PROBE_TIMEOUT_MS, gt=0, alias="probeTimeout")
    probe_interval: int = Field(default=DEFAULT_PROBE_INTERVAL_MS, gt=0, alias="probeInterval")

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @property
    def connect_timeout_s(self) -> float:
        return self.connect_timeout / 1000

    @property
    def probe_timeout_s(self) -> float:
        return self.probe_timeout / 1000

    @property
    def probe_interval_s(self) -> float:
        return self.probe_interval / 1000


class ActionConfig(BaseModel):
    """Action vocabulary, hold time and reconnect backoff."""

    commands: tuple[str, ...] = Field(default=DEFAULT_COMMANDS, min_length=1)
    hold_duration: int = Field(default=DEFAULT_HOLD_DURATION_MS, gt=0, alias="holdDuration")
    retry_delay: int = Field(default=DEFAULT_RETRY_DELAY_MS, gt=0, alias="retryDelay")
    max_retry_delay: int = Field(default=DEFAULT_MAX_RETRY_DELAY_MS, gt=0, alias="maxRetryDelay")
    sprint: bool = True

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def _check_values(self) -> ActionConfig:
        if any(not command.strip() for command in self.commands):
            raise ValueError("action.commands must not contain blank entries")
        if self.max_retry_delay < self.retry_delay:
            raise ValueError("action.maxRetryDelay must be >= action.retryDelay")
        return self

    @property
    def hold_duration_s(self) -> float:
        return self.hold_duration / 1000


class BotConfig(BaseModel):
    """Complete bot configuration."""

    client: ClientConfig = Field(default_factory=ClientConfig)
    action: ActionConfig = Field(default_factory=ActionConfig)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> BotConfig:
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_file(cls, path: Path | str) -> BotConfig:
        """Load configuration from a ``.json``, ``.yaml`` or ``.yml`` file.

        Raises:
            ConfigError: If the file is missing, unparsable or invalid
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")

        log.debug("config_loading", path=str(path))
        text = path.read_text(encoding="utf-8")
        try:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping: {path}")
        return cls.from_mapping(data)

    def to_dict(self) -> dict[str, Any]:
        """Dump using the config file key names."""
        return self.model_dump(mode="json", by_alias=True)


def load_config(path: Path | str) -> BotConfig:
    return BotConfig.from_file(path)
