# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Config file location helpers."""

from __future__ import annotations

from pathlib import Path

from platformdirs import user_config_dir

from afkbot.constants import CONFIG_FILENAMES


def user_config_root() -> Path:
    """Get the per-user afkbot config directory."""
    return Path(user_config_dir("afkbot", "afkbot"))


def default_config_path(start: Path | None = None) -> Path:
    """Find the config file to load when none is given.

    Search order:
    1. ``config.json`` / ``config.yaml`` / ``config.yml`` in *start* (or cwd)
    2. The same names in the user config directory

    Falls back to ``config.json`` in the working directory so error messages
    point somewhere sensible.
    """
    base = (start or Path.cwd()).resolve()
    for root in (base, user_config_root()):
        for name in CONFIG_FILENAMES:
            candidate = root / name
            if candidate.is_file():
                return candidate
    return base / CONFIG_FILENAMES[0]
