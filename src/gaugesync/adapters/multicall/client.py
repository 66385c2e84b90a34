"""Batch caller executing contract reads through Multicall3 over JSON-RPC."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from itertools import count
from logging import getLogger
from typing import TYPE_CHECKING, TypeVar

import httpx
from eth_abi.exceptions import DecodingError
from pydantic import ValidationError

from gaugesync.adapters.http_resilience import ResilienceConfig, ResilientClient
from gaugesync.domain.deadline import remaining_or_none
from gaugesync.domain.errors import (
    BatchCallError,
    BatchTimeoutError,
    DeadlineExceededError,
    RequiredCallFailedError,
)
from gaugesync.domain.model import CallFailure, CallSuccess

from .abi import decode_aggregate3, decode_return, encode_aggregate3
from .schema import JsonRpcResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Sequence

    from gaugesync.config.registry import RegistryConfig
    from gaugesync.domain.deadline import Deadline
    from gaugesync.domain.model import CallResult, CallSpec
    from gaugesync.domain.ports.calls import BatchCaller

log = getLogger(__name__)

T = TypeVar("T")


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class MulticallBatchCaller:
    """Split calls into ``aggregate3`` batches of at most ``batch_size`` and run them.

    Batches are issued concurrently (bounded by the client's rate limit) and each
    one is a single ``eth_call``. Results come back in the order of ``calls``.
    """

    multicall3: str
    batch_size: int
    resilience: ResilienceConfig
    block: str = "latest"
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _request_ids: count[int] = field(default_factory=lambda: count(1), init=False, repr=False)

    @classmethod
    def from_config(cls, config: RegistryConfig) -> MulticallBatchCaller:
        return cls(
            multicall3=config.multicall3,
            batch_size=config.batch_size,
            resilience=config.resilience,
        )

    def __call__(
        self,
        calls: Sequence[CallSpec],
        *,
        deadline: Deadline | None = None,
    ) -> list[CallResult]:
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if not calls:
            return []
        return asyncio.run(self._execute_async(list(calls), deadline))

    async def _execute_async(
        self,
        calls: list[CallSpec],
        deadline: Deadline | None,
    ) -> list[CallResult]:
        offsets = range(0, len(calls), self.batch_size)
        log.debug("Executing %s calls in %s batches", len(calls), len(offsets))
        try:
            async with asyncio.timeout(remaining_or_none(deadline)):
                async with self.client_factory(self.resilience) as client:
                    batches = await _gather_or_cancel(
                        [
                            self._execute_batch(
                                client, calls[offset : offset + self.batch_size], offset
                            )
                            for offset in offsets
                        ]
                    )
        except TimeoutError as exc:
            raise DeadlineExceededError(
                f"Deadline exceeded while executing {len(calls)} contract calls"
            ) from exc
        return [result for batch in batches for result in batch]

    async def _execute_batch(
        self,
        client: ResilientClient,
        calls: Sequence[CallSpec],
        offset: int,
    ) -> list[CallResult]:
        request_id = next(self._request_ids)
        payload = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": "eth_call",
            "params": [
                {"to": self.multicall3, "data": "0x" + encode_aggregate3(calls).hex()},
                self.block,
            ],
        }
        try:
            response = await client.post(self.resilience.base_url or "", json=payload)
            response.raise_for_status()
            body = JsonRpcResponse.model_validate(response.json())
        except httpx.TimeoutException as exc:
            raise BatchTimeoutError(
                f"Batch of {len(calls)} calls at offset {offset} timed out"
            ) from exc
        except httpx.HTTPError as exc:
            raise BatchCallError(f"Batch at offset {offset} failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise BatchCallError(f"Batch at offset {offset} returned malformed JSON-RPC") from exc

        if body.error is not None:
            raise BatchCallError(
                f"eth_call for batch at offset {offset} failed with "
                f"{body.error.code}: {body.error.message}"
            )
        try:
            outcomes = decode_aggregate3(body.result_bytes())
        except (DecodingError, ValueError) as exc:
            raise BatchCallError(
                f"Undecodable aggregate3 result for batch at offset {offset}"
            ) from exc
        if len(outcomes) != len(calls):
            raise BatchCallError(
                f"aggregate3 returned {len(outcomes)} results for {len(calls)} calls"
            )

        return [
            _interpret(call, position, success, data)
            for position, (call, (success, data)) in enumerate(
                zip(calls, outcomes, strict=True), start=offset
            )
        ]


def _interpret(call: CallSpec, position: int, success: bool, data: bytes) -> CallResult:
    result: CallResult
    if not success:
        result = CallFailure(reason="reverted")
    else:
        try:
            result = CallSuccess(value=decode_return(call, data))
        except (DecodingError, ValueError):
            # Contracts without the function answer with empty data; strings may not be UTF-8.
            result = CallFailure(reason=f"undecodable return data ({len(data)} bytes)")

    if isinstance(result, CallFailure) and not call.allow_failure:
        raise RequiredCallFailedError(call, position=position, reason=result.reason)
    return result


async def _gather_or_cancel(
    coroutines: Sequence[Coroutine[object, object, T]],
) -> list[T]:
    tasks = [asyncio.ensure_future(coroutine) for coroutine in coroutines]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


if TYPE_CHECKING:
    _caller_check: BatchCaller = MulticallBatchCaller(
        multicall3="0x", batch_size=1, resilience=ResilienceConfig(name="check")
    )
