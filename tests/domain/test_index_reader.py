from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from gaugesync.domain.chains import default_chain_table
from gaugesync.domain.errors import IndexQueryError, UnmappedChainError
from gaugesync.domain.index import IndexReader
from gaugesync.domain.model import Chain, IndexEntry
from gaugesync.domain.ports.indexing import LocalRecord, RemoteRoutedRecord

from tests.helpers.controller import FakeIndexSource, gauge_address

if TYPE_CHECKING:
    from collections.abc import Set

    from gaugesync.domain.deadline import Deadline
    from gaugesync.domain.ports.indexing import IndexRecord


def _reader(source: FakeIndexSource) -> IndexReader:
    return IndexReader(source=source, home_chain=Chain.MAINNET, chain_table=default_chain_table())


def test_read_normalises_both_record_kinds() -> None:
    added = datetime(2023, 5, 1, tzinfo=UTC)
    source = FakeIndexSource(
        records=[
            RemoteRoutedRecord(
                address=gauge_address(1),
                chain="Arbitrum",
                recipient="0x" + "CD" * 20,
                first_seen_at=added,
            ),
            LocalRecord(address=gauge_address(2)),
        ]
    )

    entries = _reader(source).read([gauge_address(1), gauge_address(2), gauge_address(3)])

    assert entries == {
        gauge_address(1): IndexEntry(
            address=gauge_address(1),
            chain=Chain.ARBITRUM,
            recipient="0x" + "cd" * 20,
            first_seen_at=added,
        ),
        gauge_address(2): IndexEntry(address=gauge_address(2), chain=Chain.MAINNET),
    }


def test_read_queries_lowercased_unique_addresses() -> None:
    source = FakeIndexSource()

    _reader(source).read(["0x" + "AA" * 20, "0x" + "aa" * 20])

    assert source.queries == [frozenset({"0x" + "aa" * 20})]


def test_read_without_addresses_skips_the_source() -> None:
    source = FakeIndexSource()

    assert _reader(source).read([]) == {}
    assert source.queries == []


def test_unknown_index_chain_is_fatal() -> None:
    source = FakeIndexSource(
        records=[RemoteRoutedRecord(address=gauge_address(1), chain="Moonbeam")]
    )

    with pytest.raises(UnmappedChainError) as excinfo:
        _reader(source).read([gauge_address(1)])

    assert excinfo.value.stage == "index"
    assert excinfo.value.address == gauge_address(1)


def test_index_query_failure_names_its_stage() -> None:
    def failing_source(
        addresses: Set[str],
        *,
        deadline: Deadline | None = None,
    ) -> list[IndexRecord]:
        raise IndexQueryError("Gauge subgraph error: indexing_error")

    reader = IndexReader(
        source=failing_source, home_chain=Chain.MAINNET, chain_table=default_chain_table()
    )

    with pytest.raises(IndexQueryError, match="indexing_error") as excinfo:
        reader.read([gauge_address(1)])

    assert excinfo.value.stage == "index"
