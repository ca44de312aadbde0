"""Matching query patterns to reference bins by counting shared minimisers."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Iterator, Protocol, Sequence


class _Thresholder(Protocol):
    def get(self, minimiser_count: int) -> int: ...


def pattern_begin_positions(read_len: int, pattern_size: int, query_every: int) -> Iterator[int]:
    """Yield the begin positions of the patterns of a query.

    Patterns start every query_every positions. If that leaves the end of the
    query uncovered, one more pattern ends exactly at the end of the query.
    For a read of length 150, patterns of 50 and query_every 30 this yields
    0, 30, 60, 90, 100.
    """
    if read_len < pattern_size:
        raise ValueError(f"Query of length {read_len} is shorter than the pattern size {pattern_size}.")
    if query_every < 1:
        raise ValueError("query_every must be at least 1.")

    last_start = read_len - pattern_size
    last_begin = 0
    for begin in range(0, last_start + 1, query_every):
        yield begin
        last_begin = begin
    if last_begin < last_start:
        yield last_start


@dataclass(frozen=True)
class PatternBounds:
    """The half-open range [begin_position, end_position) of a pattern's minimisers and its threshold."""

    begin_position: int
    end_position: int
    threshold: int


def make_pattern_bounds(
    begin: int,
    pattern_size: int,
    window_size: int,
    window_span_begin: Sequence[int],
    thresholder: _Thresholder,
) -> PatternBounds:
    """Find the minimisers of the pattern starting at begin and the threshold for their number.

    window_span_begin holds, for each minimiser of the query, the begin of the
    first window it is the minimiser of; it is sorted and starts with 0.
    """
    if not window_span_begin or window_span_begin[0] != 0:
        raise ValueError("The first minimiser must start at position 0.")

    # The element found is the second minimiser of the pattern.
    second = bisect.bisect_right(window_span_begin, begin)
    if second == len(window_span_begin):
        raise ValueError(f"No minimiser follows position {begin}.")
    begin_position = second - 1

    last_window_of_pattern = begin + pattern_size - window_size
    # The element found is the first minimiser after the pattern.
    end_position = bisect.bisect_right(window_span_begin, last_window_of_pattern)
    if end_position == 0:
        raise ValueError(f"No minimiser lies within the pattern starting at {begin}.")

    threshold = thresholder.get(end_position - begin_position)
    return PatternBounds(begin_position, end_position, threshold)


def find_pattern_bins(pattern: PatternBounds, counting_table: Sequence[Sequence[int]]) -> set[int]:
    """Bins in which at least the pattern's threshold of its minimisers occur.

    counting_table has one row per minimiser of the query and one column per
    bin, holding 1 (or True) where the minimiser occurs in the bin.
    """
    bin_count = len(counting_table[0]) if counting_table else 0
    rows = counting_table[pattern.begin_position : pattern.end_position]
    if rows:
        # Counters are 8 bits wide and wrap around.
        totals = [sum(int(hit) for hit in column) & 0xFF for column in zip(*rows)]
    else:
        totals = [0] * bin_count
    return {bin_id for bin_id, count in enumerate(totals) if count >= pattern.threshold}