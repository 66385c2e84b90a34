"""Value types shared by the registry, index and persistence sides of a sync."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from datetime import datetime


class Chain(StrEnum):
    MAINNET = "MAINNET"
    ARBITRUM = "ARBITRUM"
    AVALANCHE = "AVALANCHE"
    BASE = "BASE"
    FANTOM = "FANTOM"
    FRAXTAL = "FRAXTAL"
    GNOSIS = "GNOSIS"
    MODE = "MODE"
    OPTIMISM = "OPTIMISM"
    POLYGON = "POLYGON"
    SEPOLIA = "SEPOLIA"
    SONIC = "SONIC"
    ZKEVM = "ZKEVM"


class GaugeStatus(StrEnum):
    ACTIVE = "ACTIVE"
    KILLED = "KILLED"


# Batched calls -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CallSpec:
    """A single read-only contract call.

    ``signature`` is the canonical function signature, e.g.
    ``gauge_relative_weight(address)``. Overloaded functions share a name but never
    a signature, so the selector derived from it is unambiguous. ``returns`` lists
    the ABI output types used to decode the raw return data.
    """

    target: str
    signature: str
    args: tuple[object, ...] = ()
    returns: tuple[str, ...] = ()
    allow_failure: bool = False

    @property
    def name(self) -> str:
        return self.signature.split("(", 1)[0]

    def describe(self) -> str:
        rendered_args = ", ".join(repr(arg) for arg in self.args)
        return f"{self.target}.{self.name}({rendered_args})"


@dataclass(frozen=True, slots=True)
class CallSuccess:
    value: object


@dataclass(frozen=True, slots=True)
class CallFailure:
    reason: str


CallResult: TypeAlias = CallSuccess | CallFailure


# Registry and index views --------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """One gauge as the on-chain controller sees it."""

    address: str
    classification: str
    is_killed: bool
    weight: float
    weight_cap: float | None = None


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """One gauge as the indexed source sees it, normalised to a single shape."""

    address: str
    chain: Chain
    recipient: str | None = None
    first_seen_at: datetime | None = None


# Reconciled result ----------------------------------------------------------------


def is_eligible(*, is_active: bool, weight: float) -> bool:
    """Return whether a gauge must stay visible in the voting list.

    A killed gauge that still carries weight stays listed so voters can move their
    allocation away from it.
    """

    return is_active or weight > 0


@dataclass(frozen=True, slots=True)
class VotingGauge:
    address: str
    chain: Chain
    is_active: bool
    weight: float
    weight_cap: float | None = None
    recipient: str | None = None
    staking_gauge_id: str | None = None
    first_seen_at: datetime | None = None
    in_index: bool = False

    @property
    def status(self) -> GaugeStatus:
        return GaugeStatus.ACTIVE if self.is_active else GaugeStatus.KILLED

    @property
    def is_eligible(self) -> bool:
        return is_eligible(is_active=self.is_active, weight=self.weight)
