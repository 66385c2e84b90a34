from __future__ import annotations

from datetime import UTC, datetime
from types import SimpleNamespace
from typing import TYPE_CHECKING, cast

import pytest
from sqlalchemy import create_engine, func, inspect, select

from gaugesync.adapters.sqlalchemy import staking_gauge_table, voting_gauge_table
from gaugesync.adapters.sqlalchemy.repositories import SqlAlchemyVotingGaugeRepository
from gaugesync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyGaugeUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from gaugesync.config.errors import ConfigurationError
from gaugesync.domain.model import Chain, GaugeStatus, VotingGauge

from tests.helpers.controller import gauge_address

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def _gauge(**overrides: object) -> VotingGauge:
    values: dict[str, object] = {
        "address": gauge_address(1),
        "chain": Chain.ARBITRUM,
        "is_active": True,
        "weight": 0.125,
        "weight_cap": 0.05,
        "recipient": "0x" + "ee" * 20,
        "staking_gauge_id": "staking-1",
        "first_seen_at": datetime(2023, 1, 1, tzinfo=UTC),
        "in_index": True,
    }
    values.update(overrides)
    return VotingGauge(**values)  # type: ignore[arg-type]


@pytest.fixture
def seeded_staking(add_staking_gauge: Callable[[str, Chain, str], None]) -> None:
    add_staking_gauge("staking-1", Chain.ARBITRUM, "0x" + "ee" * 20)
    add_staking_gauge("staking-2", Chain.MAINNET, gauge_address(2))


@pytest.mark.usefixtures("seeded_staking")
def test_upsert_then_get_round_trips(
    sqlite_unit_of_work: Callable[[], SqlAlchemyGaugeUnitOfWork],
) -> None:
    gauge = _gauge()
    with sqlite_unit_of_work() as uow:
        uow.repositories.voting_gauges.upsert(gauge)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.voting_gauges.get(address=gauge.address, chain=Chain.ARBITRUM)

    assert stored == gauge
    assert stored is not None
    assert stored.status is GaugeStatus.ACTIVE


@pytest.mark.usefixtures("seeded_staking")
def test_upsert_is_idempotent_and_updates_in_place(
    sqlite_unit_of_work: Callable[[], SqlAlchemyGaugeUnitOfWork],
    sqlite_engine: Engine,
) -> None:
    for gauge in (_gauge(), _gauge(), _gauge(is_active=False, weight=0.0, weight_cap=None)):
        with sqlite_unit_of_work() as uow:
            uow.repositories.voting_gauges.upsert(gauge)
            uow.commit()

    with sqlite_engine.connect() as connection:
        count = connection.execute(select(func.count()).select_from(voting_gauge_table)).scalar()
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.voting_gauges.get(address=gauge_address(1), chain=Chain.ARBITRUM)

    assert count == 1
    assert stored is not None
    assert stored.status is GaugeStatus.KILLED
    assert stored.weight == 0.0
    assert stored.weight_cap is None


@pytest.mark.usefixtures("seeded_staking")
def test_same_address_on_two_chains_is_two_rows(
    sqlite_unit_of_work: Callable[[], SqlAlchemyGaugeUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.voting_gauges.upsert(_gauge())
        uow.repositories.voting_gauges.upsert(
            _gauge(chain=Chain.MAINNET, recipient=None, staking_gauge_id=None)
        )
        uow.commit()

    with sqlite_unit_of_work() as uow:
        everything = uow.repositories.voting_gauges.list_all()
        mainnet = uow.repositories.voting_gauges.list_all(chain=Chain.MAINNET)

    assert [(gauge.chain, gauge.address) for gauge in everything] == [
        (Chain.ARBITRUM, gauge_address(1)),
        (Chain.MAINNET, gauge_address(1)),
    ]
    assert [gauge.chain for gauge in mainnet] == [Chain.MAINNET]


def test_uncommitted_work_is_discarded(
    sqlite_unit_of_work: Callable[[], SqlAlchemyGaugeUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.voting_gauges.upsert(_gauge(staking_gauge_id=None))

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.voting_gauges.list_all() == []


@pytest.mark.usefixtures("seeded_staking")
def test_staking_gauge_lookup(
    sqlite_unit_of_work: Callable[[], SqlAlchemyGaugeUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        staking = uow.repositories.staking_gauges

        assert staking.find_id(chain=Chain.ARBITRUM, gauge_address="0x" + "EE" * 20) == "staking-1"
        assert staking.find_id(chain=Chain.MAINNET, gauge_address=gauge_address(2)) == "staking-2"
        assert staking.find_id(chain=Chain.ARBITRUM, gauge_address=gauge_address(2)) is None


def test_startup_lifecycle(sqlite_engine: Engine) -> None:
    shutdown()
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyGaugeUnitOfWork()

    startup(engine=sqlite_engine)
    try:
        assert configured_engine() is sqlite_engine
        with pytest.raises(StartupError, match="already configured"):
            startup(engine=sqlite_engine)
    finally:
        shutdown()
    assert configured_engine() is None


def test_startup_requires_staking_table(tmp_path: Path) -> None:
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'empty.db'}")
    try:
        with pytest.raises(StartupError, match="staking_gauge"):
            startup(engine=engine, force=True)
        assert not is_started()
        assert not inspect(engine).has_table("voting_gauge")
    finally:
        engine.dispose()


def test_startup_creates_voting_gauge_table(tmp_path: Path) -> None:
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'staking-only.db'}")
    staking_gauge_table.create(engine)
    try:
        startup(engine=engine, force=True)
        assert inspect(engine).has_table("voting_gauge")
    finally:
        shutdown()


def test_upsert_rejects_unsupported_dialect() -> None:
    bind = SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
    session = SimpleNamespace(get_bind=lambda: bind)
    repository = SqlAlchemyVotingGaugeRepository(cast("Session", session))

    with pytest.raises(ConfigurationError, match="mysql"):
        repository.upsert(_gauge())
