"""Segments of sequences and the database segments searched for local matches."""

from __future__ import annotations

import functools
from typing import MutableSequence

_COMPLEMENT = str.maketrans("ACGTNacgtn", "TGCANtgcan")


def reverse_complement(sequence: str) -> str:
    """The reverse complement of a DNA sequence."""
    return sequence.translate(_COMPLEMENT)[::-1]


@functools.total_ordering
class SequenceSegment:
    """The half-open interval [begin, end) of an underlying sequence.

    Segments compare by the identity of their underlying sequence first and then
    by their positions.
    """

    def __init__(self, sequence, begin: int, end: int) -> None:
        if not 0 <= begin <= end <= len(sequence):
            raise ValueError(f"Invalid segment [{begin}, {end}) of a sequence of length {len(sequence)}")
        self.sequence = sequence
        self.begin = begin
        self.end = end

    def interval(self) -> tuple[int, int]:
        return self.begin, self.end

    def __len__(self) -> int:
        return self.end - self.begin

    def infix(self):
        """The part of the underlying sequence covered by the segment."""
        return self.sequence[self.begin : self.end]

    def _key(self) -> tuple[int, int, int]:
        return id(self.sequence), self.begin, self.end

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SequenceSegment):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SequenceSegment):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(begin={self.begin}, end={self.end})"


class DatabaseSegment(SequenceSegment):
    """A segment of a reference database sequence."""


def _check_segment(length: int, min_length: int, segment_begin: int, segment_end: int) -> None:
    if length < segment_end:
        raise ValueError("Segment end out of range")
    if segment_end <= segment_begin:
        raise ValueError("Incorrect segment definition")
    if segment_end < min_length + segment_begin:
        raise ValueError("Segment shorter than minimum match length")


def get_database_segments(
    databases: MutableSequence[str],
    min_length: int,
    search_segment: bool = False,
    segment_begin: int = 0,
    segment_end: int = 0,
    reverse: bool = False,
) -> list[DatabaseSegment]:
    """Segments to search in the databases.

    With search_segment only [segment_begin, segment_end) of the first database is
    searched; otherwise every database at least min_length long. With reverse the
    databases are replaced in place by their reverse complements.
    """
    if search_segment:
        _check_segment(len(databases[0]), min_length, segment_begin, segment_end)
        if reverse:
            databases[0] = reverse_complement(databases[0])
            length = len(databases[0])
            return [DatabaseSegment(databases[0], length - segment_end, length - segment_begin)]
        return [DatabaseSegment(databases[0], segment_begin, segment_end)]

    if reverse:
        databases[:] = [reverse_complement(database) for database in databases]
    return [
        DatabaseSegment(database, 0, len(database))
        for database in databases
        if len(database) >= min_length
    ]


def get_dream_database_segment(
    sequence: str,
    min_length: int,
    segment_begin: int,
    segment_end: int,
    reverse: bool = False,
) -> DatabaseSegment:
    """The segment of interest; with reverse its positions are mirrored onto the reversed strand."""
    _check_segment(len(sequence), min_length, segment_begin, segment_end)
    if reverse:
        length = len(sequence)
        return DatabaseSegment(sequence, length - segment_end, length - segment_begin)
    return DatabaseSegment(sequence, segment_begin, segment_end)