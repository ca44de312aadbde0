"""Writing the sequences of database segments to FASTA files."""

from __future__ import annotations

import os
from pathlib import Path

from valik.metadata import Metadata
from valik.segmentation import SegmentStats
from valik.seqio import FastaRecord, read_fasta, write_fasta

_DNA4 = {"A": "A", "C": "C", "G": "G", "T": "T", "U": "T"}


def _to_dna4(sequence: str) -> str:
    """Upper-case DNA with U read as T and every other letter as A."""
    return "".join(_DNA4.get(letter, "A") for letter in sequence.upper())


def _segment_sequence(sequence: str, seg: SegmentStats) -> str:
    piece = sequence[seg.start : seg.start + seg.length]
    if len(piece) != seg.length:
        raise ValueError(f"Segment {seg.unique_id()} exceeds its sequence of length {len(sequence)}.")
    return piece


def write_reference_segments(reference_metadata: Metadata, ref_path: str | os.PathLike) -> list[Path]:
    """Write each reference segment to its own FASTA file next to ref_path.

    The segment files are named <stem>_<segment id><suffix> and listed, one per
    line, in seg_files.txt in the same directory. Returns the segment files.
    """
    ref_path = Path(ref_path)
    seg_files: list[Path] = []
    for i, record in enumerate(read_fasta(ref_path)):
        sequence = _to_dna4(record.sequence)
        for seg in reference_metadata.segments_from_ind(i):
            seg_file = ref_path.with_name(f"{ref_path.stem}_{seg.id}{ref_path.suffix}")
            write_fasta(seg_file, [FastaRecord(seg.unique_id(), _segment_sequence(sequence, seg))])
            seg_files.append(seg_file)
    ref_path.with_name("seg_files.txt").write_text("".join(f"{path}\n" for path in seg_files))
    return seg_files


def write_query_segments(query_metadata: Metadata, query_path: str | os.PathLike) -> Path:
    """Write all query segments into <query>.segments.fasta and return its path."""
    query_path = Path(query_path)
    out_path = query_path.with_suffix(".segments.fasta")
    records = [
        FastaRecord(seg.unique_id(), _segment_sequence(sequence, seg))
        for i, sequence in enumerate(_to_dna4(record.sequence) for record in read_fasta(query_path))
        for seg in query_metadata.segments_from_ind(i)
    ]
    write_fasta(out_path, records)
    return out_path