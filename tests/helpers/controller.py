"""In-memory gauge controller and index source for pipeline tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gaugesync.domain import registry
from gaugesync.domain.errors import RequiredCallFailedError
from gaugesync.domain.model import CallFailure, CallSuccess

if TYPE_CHECKING:
    from collections.abc import Sequence, Set

    from gaugesync.domain.deadline import Deadline
    from gaugesync.domain.model import CallResult, CallSpec
    from gaugesync.domain.ports.indexing import IndexRecord

WEI = 10**18
CONTROLLER = "0xc128468b7ce63ea702c1f104d55a2566b13d3abd"
MULTICALL3 = "0xca11bde05977b3631167028862be2a173976ca11"


def gauge_address(seed: int) -> str:
    return f"0x{seed:040x}"


@dataclass(slots=True)
class FakeGauge:
    address: str
    type_index: int
    weight: int = 0
    killed: bool = False
    cap: int | None = None


@dataclass(slots=True)
class FakeGaugeController:
    """Answers registry calls the way a deployed controller and its gauges would."""

    address: str
    type_names: list[str]
    gauges: list[FakeGauge]
    reverting: set[tuple[str, str]] = field(default_factory=set)
    submissions: list[list[CallSpec]] = field(default_factory=list)

    def __call__(
        self,
        calls: Sequence[CallSpec],
        *,
        deadline: Deadline | None = None,
    ) -> list[CallResult]:
        self.submissions.append(list(calls))
        results: list[CallResult] = []
        for position, call in enumerate(calls):
            result = self._answer(call)
            if isinstance(result, CallFailure) and not call.allow_failure:
                raise RequiredCallFailedError(call, position=position, reason=result.reason)
            results.append(result)
        return results

    def _answer(self, call: CallSpec) -> CallResult:
        if (call.target.lower(), call.signature) in self.reverting:
            return CallFailure(reason="reverted")
        by_address = {gauge.address.lower(): gauge for gauge in self.gauges}
        if call.target == self.address:
            arg = call.args[0] if call.args else None
            match call.signature:
                case registry.N_GAUGES:
                    return CallSuccess(len(self.gauges))
                case registry.N_GAUGE_TYPES:
                    return CallSuccess(len(self.type_names))
                case registry.GAUGE_TYPE_NAMES:
                    return CallSuccess(self.type_names[int(arg)])  # type: ignore[arg-type]
                case registry.GAUGES:
                    return CallSuccess(self.gauges[int(arg)].address)  # type: ignore[arg-type]
                case registry.GAUGE_TYPES:
                    return CallSuccess(by_address[str(arg)].type_index)
                case registry.GAUGE_RELATIVE_WEIGHT:
                    return CallSuccess(by_address[str(arg)].weight)
                case _:
                    return CallFailure(reason="unknown selector")
        gauge = by_address.get(call.target.lower())
        if gauge is None:
            return CallFailure(reason="no contract")
        if call.signature == registry.IS_KILLED:
            return CallSuccess(gauge.killed)
        if call.signature == registry.GET_RELATIVE_WEIGHT_CAP and gauge.cap is not None:
            return CallSuccess(gauge.cap)
        return CallFailure(reason="reverted")


@dataclass(slots=True)
class FakeIndexSource:
    records: list[IndexRecord] = field(default_factory=list)
    queries: list[frozenset[str]] = field(default_factory=list)

    def __call__(
        self,
        addresses: Set[str],
        *,
        deadline: Deadline | None = None,
    ) -> list[IndexRecord]:
        self.queries.append(frozenset(addresses))
        return [record for record in self.records if record.address.lower() in addresses]
