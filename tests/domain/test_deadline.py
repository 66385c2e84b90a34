from __future__ import annotations

import pytest

from gaugesync.domain.deadline import Deadline, remaining_or_none
from gaugesync.domain.errors import DeadlineExceededError


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_deadline_counts_down_and_expires() -> None:
    clock = _Clock()
    deadline = Deadline.within(5.0, clock=clock)

    assert deadline.remaining() == pytest.approx(5.0)
    deadline.check("reading the registry")

    clock.now = 106.0
    assert deadline.remaining() == 0.0
    assert deadline.expired
    with pytest.raises(DeadlineExceededError, match="reading the registry"):
        deadline.check("reading the registry")


def test_deadline_must_lie_in_the_future() -> None:
    with pytest.raises(ValueError, match="future"):
        Deadline.within(0)


def test_remaining_or_none() -> None:
    clock = _Clock()

    assert remaining_or_none(None) is None
    assert remaining_or_none(Deadline.within(2.5, clock=clock)) == pytest.approx(2.5)
