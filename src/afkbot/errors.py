# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for afkbot."""

from __future__ import annotations

import errno


class AfkBotError(Exception):
    """Base exception for afkbot."""

    pass


class ConfigError(AfkBotError):
    """Configuration could not be loaded or is invalid."""

    pass


class ClientError(AfkBotError):
    """Game client driver failure."""

    pass


class ProbeError(ClientError):
    """Server did not answer the reachability probe."""

    pass


class SessionError(ClientError):
    """Session could not be established or was lost."""

    pass


_TIMEOUT_MARKERS = ("timed out", "timeout", "etimedout")


def is_timeout_error(err: BaseException) -> bool:
    """Return True if *err* belongs to the timeout class.

    Checks the exception type, the errno and finally the message text, then
    repeats for the chained cause.
    """
    if isinstance(err, TimeoutError):
        return True
    if isinstance(err, OSError) and err.errno == errno.ETIMEDOUT:
        return True
    message = str(err).lower()
    if any(marker in message for marker in _TIMEOUT_MARKERS):
        return True
    cause = err.__cause__
    return cause is not None and cause is not err and is_timeout_error(cause)
