"""Read the full gauge controller state through a batch caller."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from gaugesync.domain.errors import BatchCallError, ReconciliationError, RequiredCallFailedError
from gaugesync.domain.model import CallSpec, CallSuccess, RegistryEntry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gaugesync.domain.deadline import Deadline
    from gaugesync.domain.model import CallResult
    from gaugesync.domain.ports.calls import BatchCaller

log = getLogger(__name__)

# Gauge controller interface. gauge_relative_weight is overloaded with a
# (address, uint256) variant; the one-argument signature reads the current week.
N_GAUGES: Final = "n_gauges()"
N_GAUGE_TYPES: Final = "n_gauge_types()"
GAUGE_TYPE_NAMES: Final = "gauge_type_names(int128)"
GAUGES: Final = "gauges(uint256)"
GAUGE_TYPES: Final = "gauge_types(address)"
GAUGE_RELATIVE_WEIGHT: Final = "gauge_relative_weight(address)"

# Gauge interface. Only newer root gauges implement the cap.
IS_KILLED: Final = "is_killed()"
GET_RELATIVE_WEIGHT_CAP: Final = "getRelativeWeightCap()"

STAGE: Final = "registry"


def from_fixed18(value: int) -> float:
    """Convert an 18-decimal fixed point integer into a float."""

    return float(Decimal(value).scaleb(-18))


@dataclass(slots=True)
class RegistryReader:
    call: BatchCaller
    gauge_controller: str
    admin_gauge_type: str

    def read(self, *, deadline: Deadline | None = None) -> list[RegistryEntry]:
        """Return every non-administrative gauge with its weight, status and cap."""

        size, type_count = self._read_counts(deadline)
        type_names = self._read_type_names(type_count, deadline)
        addresses = self._read_addresses(size, deadline)
        entries = self._read_entries(addresses, type_names, deadline)

        kept = [entry for entry in entries if entry.classification != self.admin_gauge_type]
        dropped = len(entries) - len(kept)
        if dropped:
            log.debug("Dropped %s gauges of type %r", dropped, self.admin_gauge_type)
        log.info(
            "Read %s gauges (%s types) from controller %s",
            len(kept),
            type_count,
            self.gauge_controller,
        )
        return kept

    def read_gauge_addresses(self, *, deadline: Deadline | None = None) -> list[str]:
        """Return every gauge address registered on the controller, lowercased."""

        size, _ = self._read_counts(deadline)
        return self._read_addresses(size, deadline)

    def _read_counts(self, deadline: Deadline | None) -> tuple[int, int]:
        results = self._execute(
            [
                self._controller_call(N_GAUGES, returns=("int128",)),
                self._controller_call(N_GAUGE_TYPES, returns=("int128",)),
            ],
            deadline,
        )
        size, type_count = (int(_value(result)) for result in results)
        return size, type_count

    def _read_type_names(self, type_count: int, deadline: Deadline | None) -> list[str]:
        calls = [
            self._controller_call(GAUGE_TYPE_NAMES, args=(index,), returns=("string",))
            for index in range(type_count)
        ]
        return [str(_value(result)) for result in self._execute(calls, deadline)]

    def _read_addresses(self, size: int, deadline: Deadline | None) -> list[str]:
        calls = [
            self._controller_call(GAUGES, args=(index,), returns=("address",))
            for index in range(size)
        ]
        return [str(_value(result)).lower() for result in self._execute(calls, deadline)]

    def _read_entries(
        self,
        addresses: Sequence[str],
        type_names: Sequence[str],
        deadline: Deadline | None,
    ) -> list[RegistryEntry]:
        # The four passes go out as one submission so the caller can run their
        # batches concurrently; slicing by pass keeps results aligned per address.
        count = len(addresses)
        calls: list[CallSpec] = []
        calls.extend(
            self._controller_call(GAUGE_TYPES, args=(address,), returns=("int128",))
            for address in addresses
        )
        calls.extend(
            self._controller_call(GAUGE_RELATIVE_WEIGHT, args=(address,), returns=("uint256",))
            for address in addresses
        )
        calls.extend(
            CallSpec(target=address, signature=IS_KILLED, returns=("bool",)) for address in addresses
        )
        calls.extend(
            CallSpec(
                target=address,
                signature=GET_RELATIVE_WEIGHT_CAP,
                returns=("uint256",),
                allow_failure=True,
            )
            for address in addresses
        )
        results = self._execute(calls, deadline)
        type_results = results[0:count]
        weight_results = results[count : 2 * count]
        killed_results = results[2 * count : 3 * count]
        cap_results = results[3 * count : 4 * count]

        entries: list[RegistryEntry] = []
        for position, address in enumerate(addresses):
            type_index = int(_value(type_results[position]))
            if not 0 <= type_index < len(type_names):
                raise ReconciliationError(
                    f"Gauge type {type_index} is not registered",
                    stage=STAGE,
                    address=address,
                )
            cap_result = cap_results[position]
            weight_cap = None
            if isinstance(cap_result, CallSuccess):
                weight_cap = from_fixed18(int(cap_result.value))
            else:
                log.debug("No relative weight cap for %s: %s", address, cap_result.reason)
            entries.append(
                RegistryEntry(
                    address=address,
                    classification=type_names[type_index],
                    is_killed=bool(_value(killed_results[position])),
                    weight=from_fixed18(int(_value(weight_results[position]))),
                    weight_cap=weight_cap,
                )
            )
        return entries

    def _controller_call(
        self,
        signature: str,
        *,
        args: tuple[object, ...] = (),
        returns: tuple[str, ...],
    ) -> CallSpec:
        return CallSpec(target=self.gauge_controller, signature=signature, args=args, returns=returns)

    def _execute(self, calls: Sequence[CallSpec], deadline: Deadline | None) -> list[CallResult]:
        if not calls:
            return []
        try:
            return self.call(calls, deadline=deadline)
        except RequiredCallFailedError as exc:
            address, index = _failure_context(exc.call, self.gauge_controller)
            raise ReconciliationError(
                f"Required registry call {exc.call.signature} failed: {exc.reason}",
                stage=STAGE,
                address=address,
                index=index,
            ) from exc
        except BatchCallError as exc:
            # Timeouts stay BatchTimeoutError.
            signatures = ", ".join(dict.fromkeys(call.signature for call in calls))
            raise type(exc)(f"Registry read of {signatures} failed: {exc}", stage=STAGE) from exc


def _value(result: CallResult) -> Any:
    if not isinstance(result, CallSuccess):
        raise ReconciliationError(
            f"Required registry call came back failed: {result.reason}", stage=STAGE
        )
    return result.value


def _failure_context(call: CallSpec, gauge_controller: str) -> tuple[str | None, int | None]:
    if call.target != gauge_controller:
        return call.target, None
    if call.args and isinstance(call.args[0], str):
        return call.args[0], None
    if call.args and isinstance(call.args[0], int):
        return None, call.args[0]
    return None, None
