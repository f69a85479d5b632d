# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Process settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from afkbot.paths import default_config_path


class Settings(BaseSettings):
    config_path: Path = Field(default_factory=default_config_path)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="AFKBOT_",
        extra="ignore",
    )
