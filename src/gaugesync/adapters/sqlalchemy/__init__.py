"""SQLAlchemy adapter package for gauge persistence."""

from __future__ import annotations

from .mappings import (
    UTCDateTime,
    metadata,
    staking_gauge_table,
    voting_gauge_table,
)
from .repositories import SqlAlchemyStakingGaugeRepository, SqlAlchemyVotingGaugeRepository
from .unit_of_work import (
    BaseSqlAlchemyUnitOfWork,
    SqlAlchemyGaugeUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    prepare_schema,
    shutdown,
    startup,
)

__all__ = [
    "BaseSqlAlchemyUnitOfWork",
    "SqlAlchemyGaugeUnitOfWork",
    "SqlAlchemyStakingGaugeRepository",
    "SqlAlchemyVotingGaugeRepository",
    "StartupError",
    "UTCDateTime",
    "configured_engine",
    "is_started",
    "metadata",
    "prepare_schema",
    "shutdown",
    "staking_gauge_table",
    "startup",
    "voting_gauge_table",
]
