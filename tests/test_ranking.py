from datetime import timedelta

import pytest

from clusterscan.core.ranking import SortDirection, SortKey, rank, rank_by


def names(records):
    return [r.server_name for r in records]


class TestRank:
    def test_mem_sorts_highest_first_by_default(self, make_record):
        records = [
            make_record("a", mem=100),
            make_record("b", mem=300),
            make_record("c", mem=200),
        ]

        ranked = rank(records, "mem")

        assert [r.memory_bytes for r in ranked] == [300, 200, 100]

    def test_reverse_flag_sorts_lowest_first(self, make_record):
        records = [
            make_record("a", mem=100),
            make_record("b", mem=300),
            make_record("c", mem=200),
        ]

        ranked = rank(records, "mem", reverse=True)

        assert [r.memory_bytes for r in ranked] == [100, 200, 300]

    @pytest.mark.parametrize("reverse", [False, True])
    def test_name_is_always_ascending(self, make_record, reverse):
        records = [make_record("c"), make_record("a"), make_record("b")]

        assert names(rank(records, "name", reverse=reverse)) == ["a", "b", "c"]

    @pytest.mark.parametrize(
        ("key", "field", "values"),
        [
            ("conns", "connections", (3, 9, 1)),
            ("conn", "connections", (3, 9, 1)),
            ("subs", "subscriptions", (3, 9, 1)),
            ("sub", "subscriptions", (3, 9, 1)),
            ("routes", "routes", (1, 2, 0)),
            ("route", "routes", (1, 2, 0)),
            ("gws", "gateways", (1, 2, 0)),
            ("gw", "gateways", (1, 2, 0)),
            ("cpu", "cpu", (12.5, 80.0, 0.5)),
            ("slow", "slow", (3, 9, 1)),
            ("rtt", "rtt", (0.02, 0.09, 0.01)),
        ],
    )
    def test_metric_keys(self, make_record, key, field, values):
        records = [
            make_record(name, **{field: value})
            for name, value in zip(("mid", "high", "low"), values, strict=True)
        ]

        assert names(rank(records, key)) == ["high", "mid", "low"]
        assert names(rank(records, key, reverse=True)) == ["low", "mid", "high"]

    def test_uptime_lists_longest_running_first(self, make_record):
        records = [
            make_record("fresh", uptime=timedelta(minutes=1)),
            make_record("old", uptime=timedelta(days=3)),
            make_record("mid", uptime=timedelta(hours=2)),
        ]

        assert names(rank(records, "uptime")) == ["old", "mid", "fresh"]
        assert names(rank(records, "uptime", reverse=True)) == ["fresh", "mid", "old"]

    def test_unknown_key_falls_back_to_round_trip_time(self, make_record):
        records = [make_record("a", rtt=0.01), make_record("b", rtt=0.05)]

        assert names(rank(records, "bogus")) == ["b", "a"]

    @pytest.mark.parametrize("reverse", [False, True])
    def test_ties_keep_arrival_order(self, make_record, reverse):
        records = [
            make_record("first", connections=5),
            make_record("big", connections=10),
            make_record("second", connections=5),
            make_record("third", connections=5),
        ]

        ranked = [n for n in names(rank(records, "conns", reverse)) if n != "big"]

        assert ranked == ["first", "second", "third"]

    def test_rank_does_not_mutate_input(self, make_record):
        records = [make_record("b", mem=1), make_record("a", mem=2)]
        original = list(records)

        rank(records, "mem")

        assert records == original


class TestDirection:
    def test_reverse_flag_translation(self):
        assert SortDirection.from_reverse_flag(False) is SortDirection.DESCENDING
        assert SortDirection.from_reverse_flag(True) is SortDirection.ASCENDING

    def test_rank_by_explicit_direction(self, make_record):
        records = [make_record("a", connections=1), make_record("b", connections=2)]

        ascending = rank_by(records, SortKey.CONNS, SortDirection.ASCENDING)
        descending = rank_by(records, SortKey.CONNS, SortDirection.DESCENDING)

        assert names(ascending) == ["a", "b"]
        assert names(descending) == ["b", "a"]

    def test_sort_key_parse(self):
        assert SortKey.parse("mem") is SortKey.MEM
        assert SortKey.parse(SortKey.CPU) is SortKey.CPU
        assert SortKey.parse("nope") is SortKey.RTT
