"""Tests for driver resolution."""

from __future__ import annotations

import pytest

from afkbot.client import LineGameClient, load_client
from afkbot.errors import ConfigError

from .fakes import FakeClient


def test_builtin_line_driver() -> None:
    assert isinstance(load_client("line"), LineGameClient)


def test_import_path_driver() -> None:
    assert isinstance(load_client("tests.fakes:FakeClient"), FakeClient)


@pytest.mark.parametrize(
    "driver",
    ["telnet", "tests.fakes:", ":FakeClient", "tests.missing_module:Client", "tests.fakes:Nope"],
)
def test_unknown_driver_rejected(driver: str) -> None:
    with pytest.raises(ConfigError):
        load_client(driver)


def test_driver_must_produce_game_client() -> None:
    with pytest.raises(ConfigError, match="GameClient"):
        load_client("collections:OrderedDict")


def test_driver_must_be_callable() -> None:
    with pytest.raises(ConfigError, match="callable"):
        load_client("afkbot.constants:DEFAULT_HOST")
