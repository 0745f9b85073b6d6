"""Language usage aggregation and top-N ranking."""

from __future__ import annotations
from collections.abc import Iterable
from typing import AbstractSet, Dict, List, Sequence, Tuple

from .errors import DataFormatError, InvalidConfigError

LanguageUsage = Dict[str, int]
RankedEntry = Tuple[str, int]


def _check_pair(repo_index: int, pair) -> RankedEntry:
    try:
        name, size = pair
    except (TypeError, ValueError):
        raise DataFormatError(
            f"repository #{repo_index}: expected a (language, size) pair, got {pair!r}",
            field="pair", value=pair)
    if not isinstance(name, str) or not name:
        raise DataFormatError(
            f"repository #{repo_index}: language name must be non-empty text, got {name!r}",
            field="name", value=name)
    # bool is an int subclass; a True "size" is a malformed record
    if isinstance(size, bool) or not isinstance(size, int):
        raise DataFormatError(
            f"repository #{repo_index}: size of {name} must be an integer, got {size!r}",
            field="size", value=size)
    if size < 0:
        raise DataFormatError(
            f"repository #{repo_index}: size of {name} is negative ({size})",
            field="size", value=size)
    return name, size


def aggregate(repositories: Iterable[Sequence[RankedEntry]]) -> LanguageUsage:
    """Sum per-repository language sizes into one mapping.

    Each repository record is a sequence of (language, bytes) pairs. The
    result is a new dict; the records are only read. Keys keep the order in
    which languages were first seen, which ``rank`` uses to break ties.
    """
    totals: LanguageUsage = {}
    for repo_index, record in enumerate(repositories):
        if isinstance(record, (str, bytes)) or not isinstance(record, Iterable):
            raise DataFormatError(
                f"repository #{repo_index}: expected a sequence of language pairs, got {record!r}",
                field="record", value=record)
        for pair in record:
            name, size = _check_pair(repo_index, pair)
            totals[name] = totals.get(name, 0) + size
    return totals


def rank(usage: LanguageUsage, top_n: int, ignore: AbstractSet[str] = frozenset()) -> List[RankedEntry]:
    """Top ``top_n`` (language, size) pairs by descending size, skipping ``ignore``."""
    if top_n < 0:
        raise InvalidConfigError(f"top_n must be >= 0, got {top_n}", field="top_n", value=top_n)
    eligible = [(name, size) for name, size in usage.items() if name not in ignore]
    # sorted() is stable, equal sizes stay in discovery order
    eligible = sorted(eligible, key=lambda kv: kv[1], reverse=True)
    return eligible[:top_n]
