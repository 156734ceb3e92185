from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Mapping

from ..domain.classify import Malformed, ProviderFailure, QueryTooLarge, RateLimited, classify_response
from ..domain.errors import (
    MalformedResponse, ProviderError, ProviderRateLimited, ResultSizeExceeded,
    RetriesExhausted, TransportRateLimited, UnsupportedChain,
)
from ..domain.models import ChainEndpoint, Filter, Log
from ..domain.normalize import normalize_logs
from ..domain.query import build_get_logs_query
from ..ports.explorer import EventGetter
from ..ports.http import HttpGetter
from .rate_limiter import RateLimiter
from .retry import RetryPolicy

log = logging.getLogger(__name__)


class LogFetcher(EventGetter):
    """
    Fetches event logs from Etherscan-compatible explorers, one RateLimiter per chain.

    Rate-limit signals (HTTP 429 or the in-body message) are retried according
    to `retry_policy`. A full page on a multi-block range raises
    ResultSizeExceeded so the caller can split the range; a full page on a
    single block is paginated instead, up to `max_pages` when set.
    """

    def __init__(
        self,
        chains: Mapping[int, ChainEndpoint],
        http: HttpGetter,
        *,
        retry_policy: RetryPolicy = RetryPolicy(),
        max_pages: int | None = None,
        limiters: Mapping[int, RateLimiter] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.chains = dict(chains)
        self.http = http
        self.retry_policy = retry_policy
        self.max_pages = max_pages
        self._sleep = sleep
        given = dict(limiters or {})
        self.limiters: dict[int, RateLimiter] = {
            cid: given.get(cid) or RateLimiter(ep.identifier, ep.requests_per_window, ep.window_s)
            for cid, ep in self.chains.items()
        }

    async def get_events(self, chain_id: int, filter: Filter, page: int = 1) -> list[Log]:
        endpoint = self.chains.get(chain_id)
        if endpoint is None:
            raise UnsupportedChain(chain_id)
        limiter = self.limiters[chain_id]

        out: list[Log] = []
        attempts = 0
        while True:
            query = build_get_logs_query(filter, page, endpoint.api_key)
            try:
                body = await limiter.submit(partial(self.http.get, endpoint.api_url, query))
            except TransportRateLimited as e:
                attempts = await self._before_retry(endpoint, attempts, e)
                continue

            outcome = classify_response(body)
            if isinstance(outcome, RateLimited):
                attempts = await self._before_retry(endpoint, attempts, ProviderRateLimited(outcome.message))
                continue
            attempts = 0

            if isinstance(outcome, QueryTooLarge):
                if outcome.records is None or not filter.is_single_block():
                    raise ResultSizeExceeded(from_block=filter.resolved_from(), to_block=filter.resolved_to())
                if self.max_pages is not None and page >= self.max_pages:
                    raise ResultSizeExceeded(
                        f"Log response size exceeded: block {filter.resolved_from()} has more than {page} full pages",
                        from_block=filter.resolved_from(), to_block=filter.resolved_to(),
                    )
                log.info("%s: block %s filled page %d, fetching page %d",
                         endpoint.identifier, filter.resolved_from(), page, page + 1)
                out.extend(normalize_logs(outcome.records))
                page += 1
                continue

            if isinstance(outcome, ProviderFailure):
                raise ProviderError(outcome.message)
            if isinstance(outcome, Malformed):
                log.debug("%s: malformed response %r", endpoint.identifier, outcome.body)
                raise MalformedResponse("Could not retrieve event logs from the blockchain")

            out.extend(normalize_logs(outcome.records))
            return out

    async def _before_retry(self, endpoint: ChainEndpoint, attempts: int, cause: Exception) -> int:
        attempts += 1
        if not self.retry_policy.allows(attempts):
            raise RetriesExhausted(endpoint.identifier, attempts) from cause
        delay = self.retry_policy.delay(attempts)
        log.warning("%s: rate limit reached (%s), retrying in %.2fs", endpoint.identifier, cause, delay)
        if delay > 0:
            await self._sleep(delay)
        return attempts

    async def aclose(self) -> None:
        await asyncio.gather(*(l.aclose() for l in self.limiters.values()))

    async def __aenter__(self) -> "LogFetcher":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
