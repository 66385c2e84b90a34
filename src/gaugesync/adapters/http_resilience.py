"""Rate-limited, retrying async HTTP client shared by the RPC and subgraph adapters."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from gaugesync.config.http_resilience import RateLimit, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from httpx._client import UseClientDefault
    from httpx._types import (
        HeaderTypes,
        QueryParamTypes,
        RequestExtensions,
        TimeoutTypes,
        URLTypes,
    )

__all__ = [
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "build_retry",
]

log = getLogger(__name__)


def _retry_after_seconds(response: httpx.Response) -> float | None:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


def _last_outcome(retry_state: RetryCallState) -> httpx.Response:
    # Hand back the final response (or raise the final error) instead of RetryError.
    if retry_state.outcome is None:
        raise RuntimeError("Retry finished without an outcome")
    return retry_state.outcome.result()


def build_retry(policy: RetryPolicy) -> AsyncRetrying:
    """Translate ``policy`` into a tenacity retrier.

    Retryable statuses are retried like exceptions; once the attempts run out the
    last response is returned so callers see the real status code.
    """

    backoff = wait_exponential(
        multiplier=policy.backoff_factor, max=policy.max_backoff_wait
    ) + wait_random(0, policy.backoff_jitter)

    def wait(retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        if policy.respect_retry_after_header and outcome is not None and not outcome.failed:
            retry_after = _retry_after_seconds(outcome.result())
            if retry_after is not None:
                return min(retry_after, policy.max_backoff_wait)
        return backoff(retry_state)

    def log_retry(retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        if outcome is None:
            return
        reason = (
            repr(outcome.exception())
            if outcome.failed
            else f"status {outcome.result().status_code}"
        )
        log.warning("Retrying request (attempt %s): %s", retry_state.attempt_number, reason)

    return AsyncRetrying(
        stop=stop_after_attempt(policy.total + 1),
        wait=wait,
        retry=(
            retry_if_exception_type(policy.retry_on_exceptions)
            | retry_if_result(
                lambda response: response.status_code in policy.status_forcelist
            )
        ),
        before_sleep=log_retry,
        retry_error_callback=_last_outcome,
    )


class RequestOptions(TypedDict, total=False):
    json: object
    params: QueryParamTypes | None
    headers: HeaderTypes | None
    timeout: TimeoutTypes | UseClientDefault
    extensions: RequestExtensions | None


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    transport: httpx.AsyncBaseTransport


class ResilientClient:
    """``httpx.AsyncClient`` with whole-request retries and an optional rate limiter.

    Every attempt passes through the limiter. ``transport`` replaces the network
    transport, which is how tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        client_kwargs: AsyncClientOptions = {"timeout": config.timeout_seconds}
        if transport is not None:
            client_kwargs["transport"] = transport
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if config.default_headers is not None:
            client_kwargs["headers"] = dict(config.default_headers)

        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        async def do_request() -> httpx.Response:
            return await self._client.request(method, url, **kwargs)

        if method.upper() not in self.config.retry.allowed_methods:
            return await self._send(do_request)
        retrying = build_retry(self.config.retry)
        return await retrying(self._send, do_request)

    async def post(
        self,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def _send(self, func: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        if self._limiter is None:
            return await func()
        async with self._limiter:
            return await func()
