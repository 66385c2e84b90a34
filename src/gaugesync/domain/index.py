"""Normalise indexed gauge records into address-keyed entries."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from gaugesync.domain.chains import lookup_chain
from gaugesync.domain.errors import IndexQueryError, UnmappedChainError
from gaugesync.domain.model import IndexEntry
from gaugesync.domain.ports.indexing import LocalRecord, RemoteRoutedRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from gaugesync.domain.deadline import Deadline
    from gaugesync.domain.model import Chain
    from gaugesync.domain.ports.indexing import IndexRecord, IndexSource

log = getLogger(__name__)

STAGE: Final = "index"


@dataclass(slots=True)
class IndexReader:
    source: IndexSource
    home_chain: Chain
    chain_table: Mapping[str, Chain]

    def read(
        self,
        addresses: Iterable[str],
        *,
        deadline: Deadline | None = None,
    ) -> dict[str, IndexEntry]:
        """Fetch index records for ``addresses`` and key them by lowercase address."""

        wanted = frozenset(address.lower() for address in addresses)
        if not wanted:
            return {}
        try:
            records = self.source(wanted, deadline=deadline)
        except IndexQueryError as exc:
            raise IndexQueryError(
                f"Index lookup of {len(wanted)} gauges failed: {exc}", stage=STAGE
            ) from exc
        entries = {entry.address: entry for entry in map(self.normalize, records)}
        log.info("Index knows %s of %s gauges", len(entries), len(wanted))
        return entries

    def normalize(self, record: IndexRecord) -> IndexEntry:
        match record:
            case RemoteRoutedRecord():
                address = record.address.lower()
                chain = lookup_chain(record.chain, self.chain_table)
                if chain is None:
                    raise UnmappedChainError(
                        f"Index reports unsupported chain {record.chain!r}",
                        stage=STAGE,
                        address=address,
                    )
                return IndexEntry(
                    address=address,
                    chain=chain,
                    recipient=record.recipient.lower() if record.recipient else None,
                    first_seen_at=record.first_seen_at,
                )
            case LocalRecord():
                return IndexEntry(
                    address=record.address.lower(),
                    chain=self.home_chain,
                    first_seen_at=record.first_seen_at,
                )
