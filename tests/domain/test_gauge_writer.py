from __future__ import annotations

import pytest

from gaugesync.domain.model import Chain, VotingGauge
from gaugesync.domain.persistence import GaugeWriter, StakingGaugeFinder

from tests.helpers.controller import gauge_address
from tests.helpers.persistence import FakeGaugeUnitOfWork


def _gauge(seed: int) -> VotingGauge:
    return VotingGauge(
        address=gauge_address(seed),
        chain=Chain.MAINNET,
        is_active=True,
        weight=0.1,
        staking_gauge_id=f"staking-{seed}",
    )


def test_writer_commits_each_gauge_separately() -> None:
    uow = FakeGaugeUnitOfWork()
    writer = GaugeWriter(unit_of_work_factory=lambda: uow)

    assert writer.write(_gauge(1))
    assert writer.write(_gauge(2))

    assert uow.commits == 2
    assert writer.summary.written == 2
    assert writer.summary.failed == []
    assert uow.voting.get(address=gauge_address(2), chain=Chain.MAINNET) == _gauge(2)


def test_writer_failure_is_logged_and_isolated(caplog: pytest.LogCaptureFixture) -> None:
    uow = FakeGaugeUnitOfWork()
    uow.voting.broken.add(gauge_address(2))
    writer = GaugeWriter(unit_of_work_factory=lambda: uow)

    results = [writer.write(_gauge(seed)) for seed in (1, 2, 3)]

    assert results == [True, False, True]
    assert writer.summary.written == 2
    assert writer.summary.failed == [(gauge_address(2), Chain.MAINNET)]
    assert {gauge.address for gauge in uow.voting.list_all()} == {
        gauge_address(1),
        gauge_address(3),
    }
    assert "Failed to persist voting gauge" in caplog.text


def test_staking_gauge_finder_lowercases_the_address() -> None:
    uow = FakeGaugeUnitOfWork()
    uow.staking.ids[(Chain.GNOSIS, "0x" + "ab" * 20)] = "staking-gnosis"
    finder = StakingGaugeFinder(unit_of_work_factory=lambda: uow)

    assert finder(Chain.GNOSIS, "0x" + "AB" * 20) == "staking-gnosis"
    assert finder(Chain.BASE, "0x" + "ab" * 20) is None
