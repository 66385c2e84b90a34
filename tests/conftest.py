from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from gaugesync.adapters.sqlalchemy import metadata, staking_gauge_table
from gaugesync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyGaugeUnitOfWork,
    shutdown,
    startup,
)

from tests.helpers.controller import CONTROLLER, MULTICALL3

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from gaugesync.domain.model import Chain


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[Engine]:
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'gauges.db'}")
    metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyGaugeUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyGaugeUnitOfWork:
        return SqlAlchemyGaugeUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def add_staking_gauge(sqlite_engine: Engine) -> Callable[[str, Chain, str], None]:
    def add(staking_id: str, chain: Chain, gauge_address: str) -> None:
        with sqlite_engine.begin() as connection:
            connection.execute(
                staking_gauge_table.insert().values(
                    id=staking_id, chain=chain, gauge_address=gauge_address.lower()
                )
            )

    return add


@pytest.fixture
def registry_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GAUGESYNC_RPC_URL", "https://rpc.example/")
    monkeypatch.setenv("GAUGESYNC_GAUGE_CONTROLLER", CONTROLLER.upper().replace("0X", "0x"))
    monkeypatch.setenv("GAUGESYNC_MULTICALL3", MULTICALL3)
    monkeypatch.setenv("GAUGESYNC_HOME_CHAIN", "mainnet")
    monkeypatch.setenv("GAUGESYNC_BATCH_SIZE", "100")
    monkeypatch.setenv("GAUGESYNC_ADMIN_GAUGE_TYPE", "Liquidity Mining Committee")
    monkeypatch.setenv("GAUGESYNC_SUBGRAPH_URL", "https://subgraph.example/gauges")
