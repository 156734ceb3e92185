from __future__ import annotations
from dataclasses import dataclass
from typing import Callable

Backoff = Callable[[int], float]   # attempt number (1-based) -> delay in seconds


def no_backoff(attempt: int) -> float: return 0.0

def constant_backoff(delay_s: float) -> Backoff:
    return lambda attempt: delay_s

def exponential_backoff(base_s: float = 0.5, cap_s: float = 30.0) -> Backoff:
    return lambda attempt: min(cap_s, base_s * (2 ** (attempt - 1)))


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """
    How rate-limited requests are retried.

    The default retries forever without delay, on the assumption that the
    explorer eventually lets the request through. Set `max_attempts` to bound
    the number of requests made for one page.
    """
    max_attempts: int | None = None
    backoff: Backoff = no_backoff

    def allows(self, attempts: int) -> bool:
        return self.max_attempts is None or attempts < self.max_attempts

    def delay(self, attempt: int) -> float:
        return max(0.0, self.backoff(attempt))
