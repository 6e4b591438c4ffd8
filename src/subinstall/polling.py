"""
Poll budgets for the two wait phases.

A wait is expressed as a retry budget, not a wall-clock deadline:
``retries = ceil(wait_minutes * 60000 / interval_millis)`` and the
total wait is roughly ``retries * interval``. Suspension goes through
an injectable ``Sleeper`` coroutine (``asyncio.sleep`` by default) so
tests can run the loops without waiting.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

from .models import InstallStatus, PackageInstallRequest

MINUTE_MILLIS = 60000

Sleeper = Callable[[float], Awaitable[None]]


def retries_for_wait(wait_minutes: Optional[float], interval_millis: int) -> int:
    """Number of polls that fit in ``wait_minutes`` at ``interval_millis``.

    ``None`` or 0 minutes means no retries at all.

    Raises:
        ValueError: On a negative wait or a non-positive interval.
    """
    if interval_millis <= 0:
        raise ValueError(f"Poll interval must be positive, got {interval_millis}")
    if not wait_minutes:
        return 0
    if wait_minutes < 0:
        raise ValueError(f"Wait must be >= 0 minutes, got {wait_minutes}")
    return math.ceil(wait_minutes * MINUTE_MILLIS / interval_millis)


@dataclass
class PollBudget:
    """Retry counter plus the fixed delay between attempts."""

    retries: int
    interval_millis: int

    def __post_init__(self) -> None:
        if self.retries < 0:
            raise ValueError(f"Retry budget must be >= 0, got {self.retries}")

    @classmethod
    def from_wait(cls, wait_minutes: Optional[float], interval_millis: int) -> "PollBudget":
        return cls(retries_for_wait(wait_minutes, interval_millis), interval_millis)

    @property
    def interval_seconds(self) -> float:
        return self.interval_millis / 1000

    @property
    def exhausted(self) -> bool:
        return self.retries <= 0

    def consume(self) -> None:
        """Use up one retry. Never goes below zero."""
        if self.retries > 0:
            self.retries -= 1


@dataclass
class PollState:
    """One in-flight install request, owned by a single invocation."""

    request_id: str
    budget: PollBudget
    status: str = InstallStatus.IN_PROGRESS.value
    errors: List[str] = field(default_factory=list)

    @property
    def retries_remaining(self) -> int:
        return self.budget.retries

    def observe(self, record: PackageInstallRequest) -> None:
        """Record the latest status; errors are kept only for ERROR."""
        self.status = record.status
        if record.status == InstallStatus.ERROR.value:
            self.errors = list(record.errors)
