from __future__ import annotations
from itertools import combinations
from typing import Any

from .models import MAX_TOPICS, Filter

PAGE_SIZE = 1000

# topic0_1, topic0_2, topic0_3, topic1_2, topic1_3, topic2_3
_TOPIC_PAIRS: tuple[tuple[int, int], ...] = tuple(combinations(range(MAX_TOPICS), 2))


def _present(topic: Any) -> bool: return topic is not None and topic != ""

def _normalize_topics(topics: tuple[Any, ...]) -> list[Any]:
    out = [t.lower() if isinstance(t, str) else t for t in topics]
    return out + [None] * (MAX_TOPICS - len(out))


def build_get_logs_query(filter: Filter, page: int, api_key: str | None = None) -> dict[str, Any]:
    """Map a Filter onto Etherscan `logs/getLogs` query parameters.

    The explorer needs an explicit `and` operator for every pair of specified
    topics, not only adjacent ones. Contract address filtering is never sent.
    """
    topics = _normalize_topics(filter.topics)
    query: dict[str, Any] = {
        "module": "logs",
        "action": "getLogs",
        "fromBlock": filter.resolved_from(),
        "toBlock": filter.resolved_to(),
    }
    for i, topic in enumerate(topics):
        if _present(topic):
            query[f"topic{i}"] = topic
    for i, j in _TOPIC_PAIRS:
        if _present(topics[i]) and _present(topics[j]):
            query[f"topic{i}_{j}_opr"] = "and"
    query["offset"] = PAGE_SIZE
    if api_key:
        query["apiKey"] = api_key
    query["page"] = page
    return query
