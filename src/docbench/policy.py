"""
Per-call request policy.

Partition routing is derived from the record key on every call: the key
doubles as the partition key, which only works for collections partitioned on
the identifier field. Single-partition mode suppresses all routing options.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

SCAN_QUERY = "SELECT TOP @count * FROM root r WHERE r.id >= @start_key ORDER BY r.id"


@dataclass(frozen=True)
class RequestOptions:
    """Options attached to exactly one outbound call."""

    partition_key: str | None = None
    enable_cross_partition_query: bool | None = None
    if_match: str | None = None


@dataclass(frozen=True)
class QuerySpec:
    """Query text with named parameters (``@name`` -> value)."""

    text: str
    parameters: dict[str, Any] = field(default_factory=dict)


class RequestPolicy:
    """Builds request options from the partitioning mode."""

    def __init__(self, single_partition: bool = False):
        self.single_partition = single_partition

    def request_options_for(self, key: str) -> RequestOptions:
        """Options for a point operation on ``key``."""
        if self.single_partition:
            return RequestOptions()
        return RequestOptions(partition_key=key)

    def feed_options_for(self) -> RequestOptions:
        """Options for a scan; a start-key predicate can't be routed to one partition."""
        if self.single_partition:
            return RequestOptions()
        return RequestOptions(enable_cross_partition_query=True)


def with_optimistic_concurrency(options: RequestOptions, version_tag: str | None) -> RequestOptions:
    """Return a copy of ``options`` that only succeeds while the version tag still matches."""
    return dataclasses.replace(options, if_match=version_tag)


def scan_query(start_key: str, count: int) -> QuerySpec:
    """First ``count`` documents with id >= ``start_key``, ascending by id."""
    return QuerySpec(
        text=SCAN_QUERY,
        parameters={"@count": count, "@start_key": start_key},
    )
