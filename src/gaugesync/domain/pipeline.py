"""Voting gauge sync: registry and index reads, reconciliation, persistence.

Stages run in order because each needs the complete output of the previous one.
Gauges are reconciled and written one at a time, so a fatal error part way through
leaves the earlier upserts committed; a re-run overwrites them with the same
values. Gauges that disappear from the registry are never deleted.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from gaugesync.domain.errors import ReconciliationError

if TYPE_CHECKING:
    from gaugesync.domain.deadline import Deadline
    from gaugesync.domain.index import IndexReader
    from gaugesync.domain.model import VotingGauge
    from gaugesync.domain.persistence import GaugeWriter
    from gaugesync.domain.reconciliation import Reconciler
    from gaugesync.domain.registry import RegistryReader

log = getLogger(__name__)


@dataclass(slots=True)
class VotingGaugePipeline:
    registry: RegistryReader
    index: IndexReader
    reconciler: Reconciler
    writer: GaugeWriter

    def reconcile_all(self, *, deadline: Deadline | None = None) -> list[VotingGauge]:
        """Run a full sync and return every reconciled gauge, persisted or not."""

        self.writer.reset()
        entries = self.registry.read(deadline=deadline)
        indexed = self.index.read((entry.address for entry in entries), deadline=deadline)

        gauges: list[VotingGauge] = []
        for entry in entries:
            if deadline is not None:
                deadline.check(f"reconciling {entry.address}")
            try:
                gauge = self.reconciler.reconcile(entry, indexed.get(entry.address))
            except ReconciliationError:
                log.exception("Aborting sync after %s of %s gauges", len(gauges), len(entries))
                raise
            self.writer.write(gauge)
            gauges.append(gauge)

        unlinked = sum(1 for gauge in gauges if gauge.staking_gauge_id is None)
        log.info(
            "Reconciled %s gauges: written=%s, failed=%s, in_index=%s, without_staking=%s",
            len(gauges),
            self.writer.summary.written,
            len(self.writer.summary.failed),
            sum(1 for gauge in gauges if gauge.in_index),
            unlinked,
        )
        return gauges
