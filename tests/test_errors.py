"""Tests for error classification."""

from __future__ import annotations

import errno

import pytest

from afkbot.errors import ProbeError, SessionError, is_timeout_error


def _chained() -> SessionError:
    try:
        raise TimeoutError
    except TimeoutError as e:
        try:
            raise SessionError("Connection failed") from e
        except SessionError as outer:
            return outer


@pytest.mark.parametrize(
    ("err", "expected"),
    [
        (TimeoutError(), True),
        (OSError(errno.ETIMEDOUT, "Operation timed out"), True),
        (SessionError("Connection timeout to host:25565"), True),
        (ProbeError("connect ETIMEDOUT 10.0.0.1:25565"), True),
        (_chained(), True),
        (ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused"), False),
        (SessionError("Connection lost"), False),
        (ValueError("bad packet"), False),
    ],
)
def test_is_timeout_error(err: BaseException, expected: bool) -> None:
    assert is_timeout_error(err) is expected
