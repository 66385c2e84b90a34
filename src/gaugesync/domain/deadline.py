"""Run deadline threaded through every network call of a sync."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gaugesync.domain.errors import DeadlineExceededError

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True, slots=True)
class Deadline:
    expires_at: float
    clock: Callable[[], float] = field(default=time.monotonic, compare=False)

    @classmethod
    def within(cls, seconds: float, *, clock: Callable[[], float] = time.monotonic) -> Deadline:
        if seconds <= 0:
            raise ValueError("Deadline must be in the future")
        return cls(expires_at=clock() + seconds, clock=clock)

    def remaining(self) -> float:
        return max(self.expires_at - self.clock(), 0.0)

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def check(self, what: str) -> None:
        """Raise ``DeadlineExceededError`` if the deadline passed before ``what``."""

        if self.expired:
            raise DeadlineExceededError(f"Deadline exceeded before {what}")


def remaining_or_none(deadline: Deadline | None) -> float | None:
    """Seconds left for ``asyncio.timeout``; ``None`` means no limit."""

    if deadline is None:
        return None
    return deadline.remaining()
