"""Port for executing batched read-only contract calls."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gaugesync.domain.deadline import Deadline
    from gaugesync.domain.model import CallResult, CallSpec


@runtime_checkable
class BatchCaller(Protocol):
    """Execute ``calls`` and return one result per call, in input order.

    Calls with ``allow_failure`` yield ``CallFailure`` when they revert. Any other
    failing call raises ``RequiredCallFailedError`` for the whole batch; transport
    problems raise ``BatchCallError``.
    """

    def __call__(
        self,
        calls: Sequence[CallSpec],
        *,
        deadline: Deadline | None = None,
    ) -> list[CallResult]: ...


__all__ = ["BatchCaller"]
