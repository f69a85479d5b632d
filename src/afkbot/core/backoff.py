"""Exponential reconnect backoff."""

from __future__ import annotations

from afkbot.constants import BACKOFF_MULTIPLIER


class Backoff:
    """Current reconnect delay with doubling and a ceiling.

    Values are milliseconds, matching the config file.
    """

    def __init__(self, base_ms: int, max_ms: int, multiplier: int = BACKOFF_MULTIPLIER) -> None:
        if base_ms <= 0:
            raise ValueError("base_ms must be positive")
        if max_ms < base_ms:
            raise ValueError("max_ms must be >= base_ms")
        if multiplier < 1:
            raise ValueError("multiplier must be >= 1")
        self._base_ms = base_ms
        self._max_ms = max_ms
        self._multiplier = multiplier
        self._current_ms = base_ms

    @property
    def base_ms(self) -> int:
        return self._base_ms

    @property
    def max_ms(self) -> int:
        return self._max_ms

    @property
    def current_ms(self) -> int:
        return self._current_ms

    @property
    def current_s(self) -> float:
        return self._current_ms / 1000

    def reset(self) -> None:
        self._current_ms = self._base_ms

    def advance(self) -> int:
        """Grow the delay for the next cycle and return the new value."""
        self._current_ms = min(self._current_ms * self._multiplier, self._max_ms)
        return self._current_ms
