"""Bounded retry state for waiting out git's lock markers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path


@dataclass(frozen=True)
class RetryState:
    """Where one root's wait-for-idle chain stands.

    ``attempt`` counts lock checks already rescheduled; the chain gives up
    once it reaches ``max_attempts``.
    """

    root: Path
    max_attempts: int
    delay: float  # seconds between checks
    attempt: int = 0

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts

    def next(self) -> "RetryState":
        return replace(self, attempt=self.attempt + 1)
