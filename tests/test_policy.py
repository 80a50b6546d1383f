"""Tests for per-call request policy."""

import dataclasses

import pytest

from docbench.policy import (
    SCAN_QUERY,
    RequestOptions,
    RequestPolicy,
    scan_query,
    with_optimistic_concurrency,
)


class TestRequestPolicy:
    def test_key_is_partition_key(self):
        options = RequestPolicy().request_options_for("user42")

        assert options.partition_key == "user42"
        assert options.enable_cross_partition_query is None
        assert options.if_match is None

    def test_single_partition_point_options_empty(self):
        assert RequestPolicy(single_partition=True).request_options_for("user42") == RequestOptions()

    def test_feed_options_enable_cross_partition(self):
        options = RequestPolicy().feed_options_for()

        assert options.enable_cross_partition_query is True
        assert options.partition_key is None

    def test_single_partition_feed_options_empty(self):
        assert RequestPolicy(single_partition=True).feed_options_for() == RequestOptions()

    def test_fresh_options_per_call(self):
        policy = RequestPolicy()
        assert policy.request_options_for("a") is not policy.request_options_for("a")


class TestOptimisticConcurrency:
    def test_attaches_if_match(self):
        base = RequestOptions(partition_key="k")
        guarded = with_optimistic_concurrency(base, '"etag-1"')

        assert guarded.if_match == '"etag-1"'
        assert guarded.partition_key == "k"

    def test_does_not_mutate_original(self):
        base = RequestOptions(partition_key="k")
        with_optimistic_concurrency(base, '"etag-1"')

        assert base.if_match is None

    def test_options_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            RequestOptions().partition_key = "x"


class TestScanQuery:
    def test_values_are_parameters(self):
        query = scan_query("user5'; DROP", 3)

        assert query.text == SCAN_QUERY
        assert "user5" not in query.text
        assert query.parameters == {"@count": 3, "@start_key": "user5'; DROP"}

    def test_orders_by_id(self):
        assert "ORDER BY r.id" in scan_query("k", 1).text
