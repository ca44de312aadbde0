"""Metadata of a sequence database that has been split into segments."""

from __future__ import annotations

import math
import os
import struct
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from valik.segmentation import (
    SegmentStats,
    SequenceFile,
    SequenceStats,
    default_segment_length,
    make_equal_length_segments,
    split_sequences,
    trim_fasta_id,
)
from valik.seqio import read_fasta

_U64 = struct.Struct("<Q")
_F32 = struct.Struct("<f")


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return _F32.unpack(_F32.pack(value))[0]


def _scan_file(path: str, file_id: int, first_ind: int) -> list[SequenceStats]:
    return [
        SequenceStats(file_id, trim_fasta_id(record.id), ind, len(record.sequence))
        for ind, record in enumerate(read_fasta(path), start=first_ind)
    ]


class _Writer:
    """Little-endian binary encoder for the metadata file."""

    def __init__(self) -> None:
        self.parts: list[bytes] = []

    def u64(self, value: int) -> None:
        self.parts.append(_U64.pack(value))

    def f32(self, value: float) -> None:
        self.parts.append(_F32.pack(value))

    def string(self, value: str) -> None:
        data = value.encode("utf-8")
        self.u64(len(data))
        self.parts.append(data)

    def u64_list(self, values: Iterable[int]) -> None:
        values = list(values)
        self.u64(len(values))
        for value in values:
            self.u64(value)

    def getvalue(self) -> bytes:
        return b"".join(self.parts)


class _Reader:
    """Little-endian binary decoder for the metadata file."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def _take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise ValueError("Truncated metadata file.")
        chunk = self._data[self._pos : end]
        self._pos = end
        return chunk

    def u64(self) -> int:
        return _U64.unpack(self._take(_U64.size))[0]

    def f32(self) -> float:
        return _F32.unpack(self._take(_F32.size))[0]

    def string(self) -> str:
        return self._take(self.u64()).decode("utf-8")

    def u64_list(self) -> list[int]:
        return [self.u64() for _ in range(self.u64())]


@dataclass
class Metadata:
    """Sequences of a database and the segments it was split into.

    Sequence indices and segment positions are 0-based.
    """

    total_len: int = 0
    pattern_size: int = 0
    ibf_fpr: float = 0.0
    files: list[SequenceFile] = field(default_factory=list)
    sequences: list[SequenceStats] = field(default_factory=list)
    segments: list[SegmentStats] = field(default_factory=list)

    @property
    def seq_count(self) -> int:
        return len(self.sequences)

    @property
    def seg_count(self) -> int:
        return len(self.segments)

    # -- construction -------------------------------------------------------

    def _scan_database_file(self, path: str) -> None:
        self.files.append(SequenceFile(0, path))
        scanned = _scan_file(path, 0, len(self.sequences))
        self.total_len += sum(seq.length for seq in scanned)
        self.sequences.extend(scanned)
        self.sequences.sort(key=lambda seq: seq.length)

    def _scan_metagenome_bins(self, bin_paths: list[str]) -> None:
        for file_id, bin_file in enumerate(bin_paths):
            self.files.append(SequenceFile(file_id, bin_file))
            scanned = _scan_file(bin_file, file_id, len(self.sequences))
            bin_len = sum(seq.length for seq in scanned)
            self.total_len += bin_len
            self.sequences.extend(scanned)
            self.segments.append(
                SegmentStats(id=len(self.segments), seq_vec=[seq.ind for seq in scanned], length=bin_len)
            )

    def _split(self, seg_count: int, exact: bool) -> None:
        self.sequences, segments, self.total_len = split_sequences(
            self.sequences, self.total_len, seg_count, self.pattern_size, exact
        )
        self.segments.extend(segments)

    @classmethod
    def from_reference(
        cls,
        bin_paths: Iterable[str | os.PathLike],
        seg_count: int,
        pattern_size: int,
        fpr: float,
        metagenome: bool = False,
    ) -> Metadata:
        """Scan a reference database.

        A metagenome has one segment per bin file; otherwise the single file is
        split into exactly seg_count segments overlapping by pattern_size.
        """
        paths = [os.fspath(path) for path in bin_paths]
        if not paths:
            raise ValueError("No reference files given.")
        meta = cls(pattern_size=pattern_size, ibf_fpr=_f32(fpr))
        if metagenome:
            meta._scan_metagenome_bins(paths)
        else:
            meta._scan_database_file(paths[0])
            meta._split(seg_count, exact=True)
        return meta

    @classmethod
    def from_query(
        cls,
        query_file: str | os.PathLike,
        pattern_size: int,
        seg_count: int = 1,
        seg_count_in: int | None = None,
        max_segment_len: int | None = None,
        manual_parameters: bool = False,
    ) -> Metadata:
        """Scan a query file and split it into segments of roughly equal length.

        Without seg_count_in the number of segments is derived from the total
        length and max_segment_len.
        """
        meta = cls(pattern_size=pattern_size)
        meta._scan_database_file(os.fspath(query_file))
        if seg_count_in is None:
            if max_segment_len is None:
                raise ValueError("Either a segment count or a maximum segment length is required.")
            if meta.total_len > max_segment_len * 10:
                if max_segment_len <= pattern_size:
                    raise ValueError("Maximum segment length must exceed the pattern size.")
                seg_count = meta.total_len // (max_segment_len - pattern_size)
            else:
                seg_count = max(seg_count, len(meta.sequences) * 2)
        else:
            seg_count = seg_count_in

        meta._split(seg_count, exact=False)
        if manual_parameters and len(meta.segments) != seg_count:
            sys.stderr.write(
                f"[Warning] Database was split into {len(meta.segments)} instead of {seg_count} segments.\n"
            )
        return meta

    def update_segments_for_distributed_stellar(self, seg_count: int, pattern_size: int) -> None:
        """Replace the segments by ones of roughly total_len / seg_count letters."""
        default_seg_len = default_segment_length(self.total_len, seg_count, pattern_size)
        segments = make_equal_length_segments(self.sequences, pattern_size, default_seg_len)
        self.sequences.sort(key=lambda seq: seq.ind)
        segments.sort(key=lambda seg: seg.seq_vec[0])
        for i, seg in enumerate(segments):
            seg.id = i
        self.segments = segments

    # -- persistence --------------------------------------------------------

    def save(self, path: str | os.PathLike) -> None:
        """Write the metadata in binary form."""
        out = _Writer()
        out.u64(self.total_len)
        out.u64(self.pattern_size)
        out.u64(len(self.files))
        for seq_file in self.files:
            out.u64(seq_file.id)
            out.string(seq_file.path)
        out.u64(len(self.sequences))
        for seq in self.sequences:
            out.u64(seq.file_id)
            out.string(seq.id)
            out.u64(seq.ind)
            out.u64(seq.length)
        out.u64(len(self.segments))
        for seg in self.segments:
            out.u64(seg.id)
            out.u64_list(seg.seq_vec)
            out.u64(seg.start)
            out.u64(seg.length)
        out.f32(self.ibf_fpr)
        Path(path).write_bytes(out.getvalue())

    @classmethod
    def load(cls, path: str | os.PathLike) -> Metadata:
        """Read metadata written by save."""
        data = _Reader(Path(path).read_bytes())
        total_len = data.u64()
        pattern_size = data.u64()
        files = [SequenceFile(data.u64(), data.string()) for _ in range(data.u64())]
        sequences = [
            SequenceStats(data.u64(), data.string(), data.u64(), data.u64()) for _ in range(data.u64())
        ]
        segments = [
            SegmentStats(id=data.u64(), seq_vec=data.u64_list(), start=data.u64(), length=data.u64())
            for _ in range(data.u64())
        ]
        ibf_fpr = data.f32()
        return cls(total_len, pattern_size, ibf_fpr, files, sequences, segments)

    # -- queries ------------------------------------------------------------

    def ind_from_id(self, string_id: str) -> int:
        """The index of the sequence with this FASTA id."""
        for seq in self.sequences:
            if seq.id == string_id:
                return seq.ind
        raise ValueError(f"Sequence metadata does not contain sequence {string_id} from Stellar output.")

    def segment_from_bin(self, bin_id: int) -> SegmentStats:
        """The segment with the given numerical id."""
        if not 0 <= bin_id < len(self.segments):
            raise IndexError(f"Segment {bin_id} index out of range.")
        return self.segments[bin_id]

    def segments_from_ind(self, ind: int) -> list[SegmentStats]:
        """The segments that cover the sequence with index ind."""
        if not 0 <= ind < len(self.sequences):
            raise IndexError(f"Sequence {ind} index out of range.")
        return [seg for seg in self.segments if ind in seg.seq_vec]

    def __str__(self) -> str:
        lines = [f"{seq.id}\t{seq.ind}\t{seq.length}\n" for seq in self.sequences]
        lines.append("$\n")
        for seg_id, seg in enumerate(self.segments):
            inds = "".join(f"{ind}\t" for ind in seg.seq_vec)
            lines.append(f"{seg_id}\t{inds}{seg.start}\t{seg.length}\n")
        lines.append("$\n")
        return "".join(lines)

    def _length_moments(self) -> tuple[float, float]:
        if not self.segments:
            raise ValueError("There are no segments.")
        lengths = [seg.length for seg in self.segments]
        mean = sum(lengths) / len(lengths)
        sq_sum = float(sum(length * length for length in lengths))
        stdev = math.sqrt(max(0.0, sq_sum / len(lengths) - mean * mean))
        return mean, stdev

    def segment_length_stdev(self) -> float:
        """Population standard deviation of the segment lengths."""
        return self._length_moments()[1]

    def segment_length_cv(self) -> float:
        """Coefficient of variation of the segment lengths."""
        mean, stdev = self._length_moments()
        return stdev / mean