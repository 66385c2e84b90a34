"""Ports for the gauge tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gaugesync.domain.model import Chain, VotingGauge


@runtime_checkable
class StakingGaugeRepository(Protocol):
    """Read-only view of staking gauges, populated outside this package."""

    def find_id(self, *, chain: Chain, gauge_address: str) -> str | None: ...


@runtime_checkable
class VotingGaugeRepository(Protocol):
    """Persistence contract for reconciled voting gauges, keyed by (address, chain)."""

    def upsert(self, gauge: VotingGauge) -> None: ...

    def get(self, *, address: str, chain: Chain) -> VotingGauge | None: ...

    def list_all(self, *, chain: Chain | None = None) -> list[VotingGauge]: ...
