"""Gauge controller (registry) and RPC configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from gaugesync.domain.chains import default_chain_table, lookup_chain

from .env import parse_positive_int, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

    from gaugesync.domain.model import Chain

RPC_TIMEOUT_SECONDS = 20.0

_REGISTRY_ENV_VARS = (
    "GAUGESYNC_RPC_URL",
    "GAUGESYNC_GAUGE_CONTROLLER",
    "GAUGESYNC_MULTICALL3",
    "GAUGESYNC_HOME_CHAIN",
    "GAUGESYNC_ADMIN_GAUGE_TYPE",
)
BATCH_SIZE_ENV_VAR = "GAUGESYNC_BATCH_SIZE"


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Everything needed to read the gauge controller and map its gauges to chains."""

    home_chain: Chain
    gauge_controller: str
    multicall3: str
    batch_size: int
    chain_table: Mapping[str, Chain]
    admin_gauge_type: str
    resilience: ResilienceConfig


def get_registry_config(
    *,
    resilience: ResilienceConfig | None = None,
    batch_size: int | None = None,
) -> RegistryConfig:
    """Read the registry settings; an explicit ``batch_size`` replaces GAUGESYNC_BATCH_SIZE."""

    if batch_size is None:
        values = require_env_vars((*_REGISTRY_ENV_VARS, BATCH_SIZE_ENV_VAR))
        batch_size = parse_positive_int(BATCH_SIZE_ENV_VAR, values[BATCH_SIZE_ENV_VAR])
    else:
        values = require_env_vars(_REGISTRY_ENV_VARS)
        if batch_size <= 0:
            raise ConfigurationError(f"batch_size must be positive, got {batch_size}")
    chain_table = default_chain_table()

    home_chain = lookup_chain(values["GAUGESYNC_HOME_CHAIN"], chain_table)
    if home_chain is None:
        raise ConfigurationError(f"Unknown home chain: {values['GAUGESYNC_HOME_CHAIN']}")

    return RegistryConfig(
        home_chain=home_chain,
        gauge_controller=values["GAUGESYNC_GAUGE_CONTROLLER"].lower(),
        multicall3=values["GAUGESYNC_MULTICALL3"].lower(),
        batch_size=batch_size,
        chain_table=chain_table,
        admin_gauge_type=values["GAUGESYNC_ADMIN_GAUGE_TYPE"],
        resilience=resilience
        or ResilienceConfig(
            name="rpc",
            base_url=values["GAUGESYNC_RPC_URL"],
            timeout_seconds=RPC_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        ),
    )
