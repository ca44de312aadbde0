"""Splitting a sequence database into partially overlapping segments."""

from __future__ import annotations

import math
import struct
import sys
from dataclasses import dataclass, field
from typing import Iterable, Sequence


def _round_half_away(value: float) -> int:
    magnitude = math.floor(abs(value) + 0.5)
    return -magnitude if value < 0 else magnitude


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def trim_fasta_id(name: str) -> str:
    """The first whitespace-separated word of a FASTA header."""
    words = name.split()
    if not words:
        raise ValueError("Sequence name can not be empty.")
    return words[0]


@dataclass
class SequenceFile:
    """An input sequence file with its numerical id."""

    id: int
    path: str


@dataclass
class SequenceStats:
    """One database sequence: its file, FASTA id, 0-based index in the file and length."""

    file_id: int
    id: str
    ind: int
    length: int


@dataclass
class SegmentStats:
    """A database segment: the sequences it covers, its start and its length (0-based)."""

    id: int = 0
    seq_vec: list[int] = field(default_factory=list)
    start: int = 0
    length: int = 0

    def unique_id(self) -> str:
        """Sequence indices, start and length joined by underscores."""
        return "".join(f"{ind}_" for ind in self.seq_vec) + f"{self.start}_{self.length}"


def default_segment_length(total_len: int, seg_count: int, pattern_size: int) -> int:
    """The starting segment length for splitting total_len into seg_count segments."""
    if seg_count <= 0:
        raise ValueError("The number of segments must be positive.")
    default_seg_len = total_len // seg_count + 1
    if default_seg_len <= pattern_size:
        raise ValueError(
            f"Segments of length {default_seg_len}bp can not overlap by {pattern_size}bp.\n"
            "Decrease the overlap or the number of segments."
        )
    return default_seg_len


def _split_sequence(seq: SequenceStats, segments_per_seq: int, overlap: int) -> list[SegmentStats]:
    if segments_per_seq <= 1:
        return [SegmentStats(seq_vec=[seq.ind], start=0, length=seq.length)]
    actual_seg_len = math.ceil(_f32(_f32(_f32(seq.length) - overlap) / segments_per_seq))
    pieces = [SegmentStats(seq_vec=[seq.ind], start=0, length=actual_seg_len + overlap)]
    start = actual_seg_len
    while start + actual_seg_len + overlap < seq.length - overlap:
        pieces.append(SegmentStats(seq_vec=[seq.ind], start=start, length=actual_seg_len + overlap))
        start += actual_seg_len
    pieces.append(SegmentStats(seq_vec=[seq.ind], start=start, length=seq.length - start))
    return pieces


def make_exactly_n_segments(
    sequences: Iterable[SequenceStats],
    n: int,
    overlap: int,
    total_len: int,
    default_seg_len: int,
) -> list[SegmentStats]:
    """Split the sequences into exactly n segments, adapting the segment length as it goes."""
    segments: list[SegmentStats] = []
    remaining_db_len = total_len
    for seq in sequences:
        if seq.length <= default_seg_len * 1.5:
            segments.append(SegmentStats(seq_vec=[seq.ind], start=0, length=seq.length))
        else:
            remaining_seg_count = n - len(segments)
            if remaining_seg_count <= 0:
                break
            updated_seg_len = _round_half_away(_f32(_f32(remaining_db_len) / remaining_seg_count))
            segments_per_seq = _round_half_away(seq.length / updated_seg_len) if updated_seg_len else 1
            segments.extend(_split_sequence(seq, segments_per_seq, overlap))
        remaining_db_len -= seq.length

    if len(segments) != n:
        raise ValueError(f"Database was split into {len(segments)} instead of {n} segments.")
    return segments


def make_equal_length_segments(
    sequences: Iterable[SequenceStats],
    overlap: int,
    default_seg_len: int,
) -> list[SegmentStats]:
    """Split the sequences into segments of roughly default_seg_len letters."""
    segments: list[SegmentStats] = []
    for seq in sequences:
        if seq.length <= default_seg_len * 1.5:
            segments.append(SegmentStats(seq_vec=[seq.ind], start=0, length=seq.length))
        else:
            segments_per_seq = _round_half_away(seq.length / default_seg_len)
            segments.extend(_split_sequence(seq, segments_per_seq, overlap))
    return segments


def _fasta_order_segments(segments: list[SegmentStats]) -> list[SegmentStats]:
    if len(segments) > 1 and any(len(seg.seq_vec) > 1 for seg in segments):
        raise ValueError("Can't order sets of sets of sequences.")
    return sorted(segments, key=lambda seg: seg.seq_vec[0])


def split_sequences(
    sequences: Sequence[SequenceStats],
    total_len: int,
    seg_count: int,
    pattern_size: int,
    exact: bool,
) -> tuple[list[SequenceStats], list[SegmentStats], int]:
    """Assign segments to the sequences, overlapping by pattern_size.

    Sequences shorter than a tenth of the default segment length are skipped
    with a warning. With exact, exactly seg_count segments are made.
    Returns the sequences in file order, the segments with ids in file order,
    and the total length of the sequences that were not skipped.
    """
    default_seg_len = default_segment_length(total_len, seg_count, pattern_size)
    by_length = sorted(sequences, key=lambda seq: seq.length)

    len_lower_bound = default_seg_len // 10
    discarded = next(
        (i for i, seq in enumerate(by_length) if seq.length > len_lower_bound), len(by_length)
    )
    for seq in by_length[:discarded]:
        sys.stderr.write(f"Sequence: {seq.id} is too short and will be skipped.\n")
        total_len -= seq.length

    if seg_count < len(by_length) - discarded:
        raise ValueError(f"Can not split {len(by_length)} sequences into {seg_count} segments.")

    long_sequences = by_length[discarded:]
    if exact:
        segments = make_exactly_n_segments(long_sequences, seg_count, pattern_size, total_len, default_seg_len)
    else:
        segments = make_equal_length_segments(long_sequences, pattern_size, default_seg_len)

    ordered_sequences = sorted(by_length, key=lambda seq: seq.ind)
    ordered_segments = _fasta_order_segments(segments)
    for i, seg in enumerate(ordered_segments):
        seg.id = i
    return ordered_sequences, ordered_segments, total_len