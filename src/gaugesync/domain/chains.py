"""Classification name to chain resolution."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from gaugesync.domain.model import Chain

if TYPE_CHECKING:
    from collections.abc import Mapping

# Labels that differ from the chain identifier. Gauge type names are typed in by
# hand on the controller, so "veBAL" and "Ethereum" both denote the home chain.
LEGACY_CHAIN_ALIASES: Final[Mapping[str, Chain]] = MappingProxyType(
    {
        "ETHEREUM": Chain.MAINNET,
        "VEBAL": Chain.MAINNET,
        "POLYGONZKEVM": Chain.ZKEVM,
    }
)


def normalize_label(name: str) -> str:
    return name.strip().upper()


def default_chain_table() -> dict[str, Chain]:
    """Return the fixed label table: every chain's own name plus the legacy aliases."""

    table = {chain.value: chain for chain in Chain}
    table.update(LEGACY_CHAIN_ALIASES)
    return table


def lookup_chain(name: str, table: Mapping[str, Chain]) -> Chain | None:
    """Return the chain for ``name`` (case-insensitive) or ``None`` when it is unknown."""

    return table.get(normalize_label(name))
