"""Merge registry and index views into the canonical voting gauge list."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final, TypeAlias

from gaugesync.domain.chains import lookup_chain
from gaugesync.domain.errors import MissingStakingGaugeError, UnmappedChainError
from gaugesync.domain.model import Chain, VotingGauge, is_eligible

if TYPE_CHECKING:
    from collections.abc import Mapping

    from gaugesync.domain.model import IndexEntry, RegistryEntry

log = getLogger(__name__)

STAGE: Final = "reconcile"

StakingGaugeLookup: TypeAlias = Callable[[Chain, str], str | None]


@dataclass(slots=True)
class Reconciler:
    """Build one ``VotingGauge`` per registry entry.

    The index is authoritative for the chain; the registry classification is a
    hand-maintained label and is only consulted when the index has no record.
    """

    home_chain: Chain
    chain_table: Mapping[str, Chain]
    find_staking_gauge: StakingGaugeLookup

    def resolve_chain(self, entry: RegistryEntry, indexed: IndexEntry | None) -> Chain:
        if indexed is not None:
            return indexed.chain
        chain = lookup_chain(entry.classification, self.chain_table)
        if chain is None:
            raise UnmappedChainError(
                f"Gauge type {entry.classification!r} does not map to a supported chain",
                stage=STAGE,
                address=entry.address,
            )
        return chain

    def reconcile(self, entry: RegistryEntry, indexed: IndexEntry | None) -> VotingGauge:
        chain = self.resolve_chain(entry, indexed)
        is_active = not entry.is_killed
        recipient = indexed.recipient if indexed else None
        staking_gauge_id = self._resolve_staking_gauge(
            address=entry.address,
            chain=chain,
            recipient=recipient,
            eligible=is_eligible(is_active=is_active, weight=entry.weight),
        )
        return VotingGauge(
            address=entry.address,
            chain=chain,
            is_active=is_active,
            weight=entry.weight,
            weight_cap=entry.weight_cap,
            recipient=recipient,
            staking_gauge_id=staking_gauge_id,
            first_seen_at=indexed.first_seen_at if indexed else None,
            in_index=indexed is not None,
        )

    def staking_key(self, *, address: str, chain: Chain, recipient: str | None) -> str:
        """Return the address the staking gauge is registered under.

        Root gauges on the home chain proxy a child gauge elsewhere; the staking
        table knows the child by the root gauge's recipient.
        """

        if chain != self.home_chain and recipient:
            return recipient
        return address

    def _resolve_staking_gauge(
        self,
        *,
        address: str,
        chain: Chain,
        recipient: str | None,
        eligible: bool,
    ) -> str | None:
        key = self.staking_key(address=address, chain=chain, recipient=recipient)
        staking_gauge_id = self.find_staking_gauge(chain, key)
        if staking_gauge_id is not None:
            return staking_gauge_id
        if eligible:
            raise MissingStakingGaugeError(
                f"No staking gauge on {chain} for {key}",
                stage=STAGE,
                address=address,
            )
        log.debug("Storing ineligible gauge %s on %s without staking gauge", address, chain)
        return None
