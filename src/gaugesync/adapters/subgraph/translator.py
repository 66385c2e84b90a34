"""Translate gauge subgraph payloads into index records."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from gaugesync.domain.ports.indexing import LocalRecord, RemoteRoutedRecord

if TYPE_CHECKING:
    from gaugesync.domain.ports.indexing import IndexRecord

    from .schema import GaugeInfoPayload, GaugeQueryData, LiquidityGaugePayload, RootGaugePayload


def _first_seen_at(gauge: GaugeInfoPayload | None) -> datetime | None:
    if gauge is None or gauge.added_timestamp is None:
        return None
    return datetime.fromtimestamp(gauge.added_timestamp, tz=UTC)


def parse_root_gauge(payload: RootGaugePayload) -> RemoteRoutedRecord:
    return RemoteRoutedRecord(
        address=payload.id.lower(),
        chain=payload.chain,
        recipient=payload.recipient.lower() if payload.recipient else None,
        first_seen_at=_first_seen_at(payload.gauge),
    )


def parse_liquidity_gauge(payload: LiquidityGaugePayload) -> LocalRecord:
    return LocalRecord(address=payload.id.lower(), first_seen_at=_first_seen_at(payload.gauge))


def parse_gauge_query(data: GaugeQueryData) -> list[IndexRecord]:
    """Return root gauges first, then home-chain gauges, in response order."""

    records: list[IndexRecord] = [parse_root_gauge(gauge) for gauge in data.root_gauges]
    records.extend(parse_liquidity_gauge(gauge) for gauge in data.liquidity_gauges)
    return records
