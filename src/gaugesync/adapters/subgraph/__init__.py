"""Public interface for the gauge subgraph adapter."""

from __future__ import annotations

from .client import GAUGES_FOR_IDS_QUERY, GaugeSubgraphSource
from .schema import GaugeQueryData, GaugeQueryResponse, LiquidityGaugePayload, RootGaugePayload
from .translator import parse_gauge_query, parse_liquidity_gauge, parse_root_gauge

__all__ = [
    "GAUGES_FOR_IDS_QUERY",
    "GaugeQueryData",
    "GaugeQueryResponse",
    "GaugeSubgraphSource",
    "LiquidityGaugePayload",
    "RootGaugePayload",
    "parse_gauge_query",
    "parse_liquidity_gauge",
    "parse_root_gauge",
]
