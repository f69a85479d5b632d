"""Connection supervision and the action loop."""

from __future__ import annotations

from afkbot.core.action_loop import ActionLoop
from afkbot.core.backoff import Backoff
from afkbot.core.supervisor import Phase, Supervisor, SupervisorStatus
from afkbot.core.timer import PeriodicTimer

__all__ = [
    "ActionLoop",
    "Backoff",
    "PeriodicTimer",
    "Phase",
    "Supervisor",
    "SupervisorStatus",
]
