"""Errors raised while reading, reconciling and persisting voting gauges."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gaugesync.domain.model import CallSpec


class GaugeSyncError(RuntimeError):
    """Base class for sync failures that abort a run.

    ``stage`` names the part of the run that failed once a reader has attached it.
    """

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(f"{message} (stage={stage})" if stage else message)
        self.stage = stage


class BatchCallError(GaugeSyncError):
    """Raised when a batch of contract calls could not be executed as a whole."""


class BatchTimeoutError(BatchCallError):
    """Raised when a batch kept timing out after the transport exhausted its retries."""


class RequiredCallFailedError(BatchCallError):
    """Raised when a call that is not allowed to fail reverted or returned garbage."""

    def __init__(self, call: CallSpec, *, position: int, reason: str) -> None:
        super().__init__(f"Required call {call.describe()} failed at position {position}: {reason}")
        self.call = call
        self.position = position
        self.reason = reason


class IndexQueryError(GaugeSyncError):
    """Raised when the indexed data source rejects a query or returns a malformed page."""


class DeadlineExceededError(GaugeSyncError):
    """Raised when a run outlives the deadline it was given."""


class ReconciliationError(GaugeSyncError):
    """Fatal, non-retryable inconsistency detected while building the gauge list."""

    def __init__(
        self,
        message: str,
        *,
        stage: str,
        address: str | None = None,
        index: int | None = None,
    ) -> None:
        context = [f"stage={stage}"]
        if address is not None:
            context.append(f"address={address}")
        if index is not None:
            context.append(f"index={index}")
        super().__init__(f"{message} ({', '.join(context)})")
        self.stage = stage
        self.address = address
        self.index = index


class UnmappedChainError(ReconciliationError):
    """Raised when a classification or index chain name has no known chain."""


class MissingStakingGaugeError(ReconciliationError):
    """Raised when an eligible gauge has no staking gauge row to link to."""
