"""Exceptions raised while fetching logs from a block explorer."""

from __future__ import annotations


class ScanLogsError(Exception):
    """Base exception for scanlogs."""

    pass


class TransportRateLimited(ScanLogsError):
    """The explorer answered with HTTP 429 instead of an in-body message."""

    pass


class ProviderRateLimited(ScanLogsError):
    """The explorer reported its rate limit inside the response body."""

    pass


class ResultSizeExceeded(ScanLogsError):
    """The query matched too many logs; the caller should shrink the block range."""

    def __init__(self, message: str = "Log response size exceeded", *,
                 from_block: int | None = None, to_block: int | str | None = None) -> None:
        super().__init__(message)
        self.from_block = from_block
        self.to_block = to_block


class ProviderError(ScanLogsError):
    """Fatal error message returned by the explorer, passed through verbatim."""

    pass


class MalformedResponse(ScanLogsError):
    """The explorer response could not be interpreted."""

    pass


class UnsupportedChain(ScanLogsError):
    """No explorer endpoint is configured for the chain id."""

    def __init__(self, chain_id: int) -> None:
        super().__init__(f"No block explorer configured for chain {chain_id}")
        self.chain_id = chain_id


class RetriesExhausted(ScanLogsError):
    """A bounded retry policy gave up on a rate-limited request."""

    def __init__(self, identifier: str, attempts: int) -> None:
        super().__init__(f"{identifier}: still rate limited after {attempts} attempts")
        self.identifier = identifier
        self.attempts = attempts
