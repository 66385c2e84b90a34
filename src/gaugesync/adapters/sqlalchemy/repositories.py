"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from gaugesync.adapters.sqlalchemy.mappings import staking_gauge_table, voting_gauge_table
from gaugesync.config.errors import ConfigurationError
from gaugesync.domain.model import GaugeStatus, VotingGauge

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from gaugesync.domain.model import Chain

_KEY_COLUMNS = ("address", "chain")
_DIALECT_INSERTS = {"sqlite": sqlite_insert, "postgresql": postgresql_insert}


class SqlAlchemyStakingGaugeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_id(self, *, chain: Chain, gauge_address: str) -> str | None:
        stmt = (
            select(staking_gauge_table.c.id)
            .where(staking_gauge_table.c.chain == chain)
            .where(staking_gauge_table.c.gauge_address == gauge_address.lower())
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyVotingGaugeRepository:
    """Voting gauges keyed by (address, chain); writes are idempotent upserts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, gauge: VotingGauge) -> None:
        values = _row_values(gauge)
        dialect = self.session.get_bind().dialect.name
        insert = _DIALECT_INSERTS.get(dialect)
        if insert is None:
            raise ConfigurationError(f"Voting gauge upsert is not supported on {dialect}")
        stmt = insert(voting_gauge_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(_KEY_COLUMNS),
            set_={name: stmt.excluded[name] for name in values if name not in _KEY_COLUMNS},
        )
        self.session.execute(stmt)

    def get(self, *, address: str, chain: Chain) -> VotingGauge | None:
        stmt = (
            select(voting_gauge_table)
            .where(voting_gauge_table.c.address == address.lower())
            .where(voting_gauge_table.c.chain == chain)
        )
        row = self.session.execute(stmt).one_or_none()
        return _gauge_from_row(row) if row is not None else None

    def list_all(self, *, chain: Chain | None = None) -> list[VotingGauge]:
        stmt = select(voting_gauge_table).order_by(
            voting_gauge_table.c.chain, voting_gauge_table.c.address
        )
        if chain is not None:
            stmt = stmt.where(voting_gauge_table.c.chain == chain)
        return [_gauge_from_row(row) for row in self.session.execute(stmt)]


def _row_values(gauge: VotingGauge) -> dict[str, Any]:
    return {
        "address": gauge.address.lower(),
        "chain": gauge.chain,
        "status": gauge.status,
        "relative_weight": gauge.weight,
        "relative_weight_cap": gauge.weight_cap,
        "recipient": gauge.recipient,
        "staking_gauge_id": gauge.staking_gauge_id,
        "added_timestamp": gauge.first_seen_at,
        "in_index": gauge.in_index,
    }


def _gauge_from_row(row: Row[Any]) -> VotingGauge:
    return VotingGauge(
        address=row.address,
        chain=row.chain,
        is_active=row.status == GaugeStatus.ACTIVE,
        weight=row.relative_weight,
        weight_cap=row.relative_weight_cap,
        recipient=row.recipient,
        staking_gauge_id=row.staking_gauge_id,
        first_seen_at=row.added_timestamp,
        in_index=row.in_index,
    )

