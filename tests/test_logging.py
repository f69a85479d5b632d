"""Tests for logging configuration."""

from __future__ import annotations

import structlog
from structlog.testing import capture_logs

from afkbot.logging import configure_logging, get_logger
from afkbot.settings import Settings


def emitted_levels() -> list[str]:
    logger = get_logger(__name__)
    with capture_logs() as logs:
        logger.debug("debug_event")
        logger.info("info_event")
        logger.warning("warning_event")
        logger.error("error_event")
    return [entry["log_level"] for entry in logs]


def test_configure_logging_uses_settings_level() -> None:
    configure_logging(Settings(log_level="warning"))

    assert structlog.is_configured()
    assert emitted_levels() == ["warning", "error"]


def test_explicit_level_overrides_settings() -> None:
    configure_logging(Settings(log_level="error"), level="debug")

    assert emitted_levels() == ["debug", "info", "warning", "error"]


def test_unknown_level_falls_back_to_info() -> None:
    configure_logging(Settings(log_level="chatty"))

    assert emitted_levels() == ["info", "warning", "error"]
