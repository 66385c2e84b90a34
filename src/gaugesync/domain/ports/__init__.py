"""Domain port definitions for adapters."""

from __future__ import annotations

from .calls import BatchCaller
from .indexing import IndexRecord, IndexSource, LocalRecord, RemoteRoutedRecord
from .persistence import StakingGaugeRepository, VotingGaugeRepository
from .unit_of_work import (
    GaugeRepositories,
    GaugeUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "BatchCaller",
    "GaugeRepositories",
    "GaugeUnitOfWork",
    "IndexRecord",
    "IndexSource",
    "LocalRecord",
    "RemoteRoutedRecord",
    "RepositoryCollection",
    "StakingGaugeRepository",
    "UnitOfWork",
    "VotingGaugeRepository",
]
