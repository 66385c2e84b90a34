"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from gaugesync.adapters.multicall import MulticallBatchCaller
from gaugesync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyGaugeUnitOfWork,
    is_started,
    startup,
)
from gaugesync.adapters.subgraph import GaugeSubgraphSource
from gaugesync.config import get_registry_config, get_subgraph_config
from gaugesync.domain.deadline import Deadline
from gaugesync.domain.index import IndexReader
from gaugesync.domain.persistence import GaugeWriter, StakingGaugeFinder
from gaugesync.domain.pipeline import VotingGaugePipeline
from gaugesync.domain.ports.unit_of_work import GaugeUnitOfWork
from gaugesync.domain.reconciliation import Reconciler
from gaugesync.domain.registry import RegistryReader

if TYPE_CHECKING:
    from gaugesync.config import RegistryConfig
    from gaugesync.domain.model import Chain, VotingGauge
    from gaugesync.domain.ports.calls import BatchCaller
    from gaugesync.domain.ports.indexing import IndexSource

UnitOfWorkFactory = Callable[[], GaugeUnitOfWork]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncVotingGaugesResult:
    gauges: list[VotingGauge]
    written: int
    failed: list[tuple[str, Chain]]

    @property
    def reconciled(self) -> int:
        return len(self.gauges)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyGaugeUnitOfWork


def sync_voting_gauges(
    *,
    batch_caller: BatchCaller | None = None,
    index_source: IndexSource | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    registry_config: RegistryConfig | None = None,
    batch_size: int | None = None,
    deadline_seconds: float | None = None,
) -> SyncVotingGaugesResult:
    """Rebuild the voting gauge list from the controller, the subgraph and the database."""

    config = registry_config or get_registry_config(batch_size=batch_size)
    deadline = Deadline.within(deadline_seconds) if deadline_seconds is not None else None
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    effective_caller = batch_caller or MulticallBatchCaller.from_config(config)
    effective_source = index_source or GaugeSubgraphSource.from_config(get_subgraph_config())

    log.info(
        "Starting voting gauge sync: home_chain=%s, controller=%s, batch_size=%s, deadline=%ss",
        config.home_chain,
        config.gauge_controller,
        config.batch_size,
        deadline_seconds,
    )

    writer = GaugeWriter(unit_of_work_factory=effective_uow)
    pipeline = VotingGaugePipeline(
        registry=RegistryReader(
            call=effective_caller,
            gauge_controller=config.gauge_controller,
            admin_gauge_type=config.admin_gauge_type,
        ),
        index=IndexReader(
            source=effective_source,
            home_chain=config.home_chain,
            chain_table=config.chain_table,
        ),
        reconciler=Reconciler(
            home_chain=config.home_chain,
            chain_table=config.chain_table,
            find_staking_gauge=StakingGaugeFinder(unit_of_work_factory=effective_uow),
        ),
        writer=writer,
    )
    gauges = pipeline.reconcile_all(deadline=deadline)

    result = SyncVotingGaugesResult(
        gauges=gauges,
        written=writer.summary.written,
        failed=list(writer.summary.failed),
    )
    log.info(
        f"Finished voting gauge sync: reconciled={result.reconciled}, "
        f"written={result.written}, failed={len(result.failed)}"
    )
    return result


def list_voting_gauges(
    *,
    chain: Chain | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[VotingGauge]:
    """Return persisted voting gauges ordered by chain and address."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        return uow.repositories.voting_gauges.list_all(chain=chain)
