from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from .query import PAGE_SIZE

RATE_LIMIT_MARKER    = "Max rate limit reached"
QUERY_TIMEOUT_MARKER = "Query Timeout occured"   # sic, as sent by the explorer


@dataclass(slots=True, frozen=True)
class Success:
    records: list[dict[str, Any]]

@dataclass(slots=True, frozen=True)
class RateLimited:
    message: str

@dataclass(slots=True, frozen=True)
class QueryTooLarge:
    records: list[dict[str, Any]] | None = None   # set when a full page came back

@dataclass(slots=True, frozen=True)
class ProviderFailure:
    message: str

@dataclass(slots=True, frozen=True)
class Malformed:
    body: Any


Outcome = Union[Success, RateLimited, QueryTooLarge, ProviderFailure, Malformed]


def classify_response(body: Any) -> Outcome:
    """
    Reduce an explorer response body to one outcome.

    Order matters: a full page is checked before the string error channel
    because 1000 results is a normal success shape that may hide more rows.
    Explorers expose no error codes, so string results are told apart by
    substring only.
    """
    if not isinstance(body, Mapping):
        return Malformed(body)
    result = body.get("result")

    if isinstance(result, list) and len(result) == PAGE_SIZE:
        return QueryTooLarge(result)

    if isinstance(result, str):
        if RATE_LIMIT_MARKER in result:
            return RateLimited(result)
        if QUERY_TIMEOUT_MARKER in result:
            return QueryTooLarge()
        return ProviderFailure(result)

    if not isinstance(result, list):
        return Malformed(body)
    return Success(result)
