"""GraphQL client for the gauge subgraph."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from gaugesync.adapters.http_resilience import ResilienceConfig, ResilientClient
from gaugesync.domain.deadline import remaining_or_none
from gaugesync.domain.errors import DeadlineExceededError, IndexQueryError

from .schema import GaugeQueryData, GaugeQueryResponse
from .translator import parse_gauge_query

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence, Set

    from gaugesync.config.subgraph import SubgraphConfig
    from gaugesync.domain.deadline import Deadline
    from gaugesync.domain.ports.indexing import IndexRecord, IndexSource

log = getLogger(__name__)

GAUGES_FOR_IDS_QUERY: Final = """
query GaugesForIds($ids: [String!]!, $first: Int!) {
  rootGauges(first: $first, where: { id_in: $ids }) {
    id
    chain
    recipient
    gauge {
      addedTimestamp
    }
  }
  liquidityGauges(first: $first, where: { id_in: $ids }) {
    id
    gauge {
      addedTimestamp
    }
  }
}
"""


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class GaugeSubgraphSource:
    """Look up root gauges and home-chain gauges by id.

    Addresses are queried in chunks of ``page_size`` so no single ``id_in`` filter
    exceeds what the subgraph returns per page.
    """

    page_size: int
    resilience: ResilienceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    @classmethod
    def from_config(cls, config: SubgraphConfig) -> GaugeSubgraphSource:
        return cls(page_size=config.page_size, resilience=config.resilience)

    def __call__(
        self,
        addresses: Set[str],
        *,
        deadline: Deadline | None = None,
    ) -> list[IndexRecord]:
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")
        if not addresses:
            return []
        return asyncio.run(self._query_async(sorted(addresses), deadline))

    async def _query_async(
        self,
        addresses: list[str],
        deadline: Deadline | None,
    ) -> list[IndexRecord]:
        records: list[IndexRecord] = []
        try:
            async with asyncio.timeout(remaining_or_none(deadline)):
                async with self.client_factory(self.resilience) as client:
                    for offset in range(0, len(addresses), self.page_size):
                        chunk = addresses[offset : offset + self.page_size]
                        data = await self._query_chunk(client, chunk)
                        records.extend(parse_gauge_query(data))
        except TimeoutError as exc:
            raise DeadlineExceededError(
                f"Deadline exceeded while querying the index for {len(addresses)} gauges"
            ) from exc
        log.debug("Subgraph returned %s records for %s ids", len(records), len(addresses))
        return records

    async def _query_chunk(
        self,
        client: ResilientClient,
        ids: Sequence[str],
    ) -> GaugeQueryData:
        payload = {
            "query": GAUGES_FOR_IDS_QUERY,
            "variables": {"ids": list(ids), "first": len(ids)},
        }
        try:
            response = await client.post(self.resilience.base_url or "", json=payload)
            response.raise_for_status()
            body = GaugeQueryResponse.model_validate(response.json())
        except httpx.HTTPError as exc:
            raise IndexQueryError(f"Gauge subgraph request failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise IndexQueryError("Gauge subgraph returned a malformed response") from exc

        if body.errors:
            messages = "; ".join(error.message for error in body.errors)
            log.error(f"Gauge subgraph error: {messages}")
            raise IndexQueryError(f"Gauge subgraph error: {messages}")
        if body.data is None:
            raise IndexQueryError("Gauge subgraph response carried no data")
        return body.data


if TYPE_CHECKING:
    _source_check: IndexSource = GaugeSubgraphSource(
        page_size=1, resilience=ResilienceConfig(name="check")
    )
