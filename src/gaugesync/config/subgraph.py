"""Gauge subgraph configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

SUBGRAPH_TIMEOUT_SECONDS = 30.0
SUBGRAPH_PAGE_SIZE = 1000


@dataclass(frozen=True, slots=True)
class SubgraphConfig:
    page_size: int
    resilience: ResilienceConfig


def get_subgraph_config(*, resilience: ResilienceConfig | None = None) -> SubgraphConfig:
    values = require_env_vars(("GAUGESYNC_SUBGRAPH_URL",))
    return SubgraphConfig(
        page_size=SUBGRAPH_PAGE_SIZE,
        resilience=resilience
        or ResilienceConfig(
            name="gauge-subgraph",
            base_url=values["GAUGESYNC_SUBGRAPH_URL"],
            timeout_seconds=SUBGRAPH_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        ),
    )
