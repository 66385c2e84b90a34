"""Write reconciled gauges and read staking gauges through units of work."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from gaugesync.domain.model import Chain, VotingGauge
    from gaugesync.domain.ports.unit_of_work import GaugeUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class WriteSummary:
    written: int = 0
    failed: list[tuple[str, Chain]] = field(default_factory=list["tuple[str, Chain]"])


@dataclass(slots=True)
class GaugeWriter:
    """Upsert gauges one at a time, each in its own transaction.

    A failing row is logged and counted; it never stops the rows after it.
    """

    unit_of_work_factory: Callable[[], GaugeUnitOfWork]
    summary: WriteSummary = field(default_factory=WriteSummary)

    def reset(self) -> None:
        self.summary = WriteSummary()

    def write(self, gauge: VotingGauge) -> bool:
        try:
            with self.unit_of_work_factory() as uow:
                uow.repositories.voting_gauges.upsert(gauge)
                uow.commit()
        except Exception:  # noqa: BLE001
            log.exception("Failed to persist voting gauge %s on %s", gauge.address, gauge.chain)
            self.summary.failed.append((gauge.address, gauge.chain))
            return False
        self.summary.written += 1
        return True


@dataclass(slots=True)
class StakingGaugeFinder:
    """Callable lookup of staking gauge ids by (chain, gauge address)."""

    unit_of_work_factory: Callable[[], GaugeUnitOfWork]

    def __call__(self, chain: Chain, gauge_address: str) -> str | None:
        with self.unit_of_work_factory() as uow:
            return uow.repositories.staking_gauges.find_id(
                chain=chain, gauge_address=gauge_address.lower()
            )
