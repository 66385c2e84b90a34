"""Pydantic models describing gauge subgraph GraphQL responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SubgraphBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GaugeInfoPayload(SubgraphBaseModel):
    added_timestamp: int | None = Field(default=None, alias="addedTimestamp")


class RootGaugePayload(SubgraphBaseModel):
    id: str
    chain: str
    recipient: str | None = None
    gauge: GaugeInfoPayload | None = None


class LiquidityGaugePayload(SubgraphBaseModel):
    id: str
    gauge: GaugeInfoPayload | None = None


class GaugeQueryData(SubgraphBaseModel):
    root_gauges: list[RootGaugePayload] = Field(default_factory=list, alias="rootGauges")
    liquidity_gauges: list[LiquidityGaugePayload] = Field(
        default_factory=list, alias="liquidityGauges"
    )


class GraphQLError(SubgraphBaseModel):
    message: str


class GaugeQueryResponse(SubgraphBaseModel):
    data: GaugeQueryData | None = None
    errors: list[GraphQLError] | None = None
