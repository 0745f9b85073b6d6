"""Aggregation and ranking of language usage.
Run: pytest -q
"""
import itertools
import pathlib
import sys

import pytest

repo_root = pathlib.Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from toplangs.errors import DataFormatError, InvalidConfigError
from toplangs.usage import aggregate, rank

REPOS = [
    [("Python", 1200), ("Shell", 40)],
    [("Rust", 500), ("Python", 300)],
    [("Go", 0)],
    [],
]


def test_aggregate_sums_same_language():
    usage = aggregate([[("Rust", 100)], [("Rust", 250), ("C", 7)]])
    assert usage == {"Rust": 350, "C": 7}


def test_aggregate_order_independent():
    expected = aggregate(REPOS)
    for perm in itertools.permutations(REPOS):
        assert aggregate(perm) == expected


def test_aggregate_keeps_zero_sizes():
    usage = aggregate(REPOS)
    assert usage["Go"] == 0
    assert usage == {"Python": 1500, "Shell": 40, "Rust": 500, "Go": 0}


def test_aggregate_does_not_touch_input():
    records = [[("Rust", 1)], [("Rust", 2)]]
    aggregate(records)
    assert records == [[("Rust", 1)], [("Rust", 2)]]


@pytest.mark.parametrize("record, field", [
    ([("Rust", -1)], "size"),
    ([("Rust", "12")], "size"),
    ([("Rust", 1.5)], "size"),
    ([("Rust", True)], "size"),
    ([(None, 3)], "name"),
    ([("", 3)], "name"),
    ([("Rust",)], "pair"),
    ("Rust", "record"),
])
def test_aggregate_rejects_malformed(record, field):
    with pytest.raises(DataFormatError) as exc:
        aggregate([[("C", 1)], record])
    assert exc.value.field == field
    assert "repository #1" in str(exc.value)


def test_rank_excludes_ignored():
    usage = {"Rust": 500, "HTML": 9000, "Go": 300}
    assert rank(usage, 5, {"HTML"}) == [("Rust", 500), ("Go", 300)]


def test_rank_orders_and_truncates():
    usage = {"A": 10, "B": 50, "C": 30, "D": 20}
    assert rank(usage, 2, set()) == [("B", 50), ("C", 30)]


def test_rank_top_n_larger_than_input():
    assert rank({"A": 1, "B": 2}, 5, set()) == [("B", 2), ("A", 1)]


def test_rank_zero():
    assert rank({"A": 1}, 0) == []


def test_rank_ties_keep_discovery_order():
    usage = {"Zig": 10, "Ada": 10, "C": 10}
    assert [name for name, _ in rank(usage, 3)] == ["Zig", "Ada", "C"]


def test_rank_does_not_mutate():
    usage = {"A": 10, "HTML": 50}
    rank(usage, 1, {"HTML"})
    assert usage == {"A": 10, "HTML": 50}


def test_rank_negative_top_n():
    with pytest.raises(InvalidConfigError):
        rank({"A": 1}, -1)
