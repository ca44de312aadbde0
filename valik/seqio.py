"""Reading and writing FASTA (and reading FASTQ) sequence files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Iterator

_LINE_WIDTH = 80


@dataclass
class FastaRecord:
    """A sequence with its full header line (without the leading '>' or '@')."""

    id: str
    sequence: str


def _read_fastq(lines: Iterator[str], header: str) -> tuple[FastaRecord, str | None]:
    """Parse one FASTQ record whose header is already read; return it and the next header."""
    parts: list[str] = []
    for line in lines:
        if line.startswith("+"):
            break
        parts.append(line.strip())
    else:
        raise ValueError(f"FASTQ record {header!r} has no quality line")
    sequence = "".join(parts)
    quality_length = 0
    for line in lines:
        if quality_length >= len(sequence):
            if not line.strip():
                continue
            return FastaRecord(header, sequence), line
        quality_length += len(line.strip())
    if quality_length != len(sequence):
        raise ValueError(f"FASTQ record {header!r} has qualities of the wrong length")
    return FastaRecord(header, sequence), None


def read_fasta(path: str | os.PathLike) -> Iterator[FastaRecord]:
    """Yield the records of a FASTA or FASTQ file in file order."""
    with open(path, encoding="ascii") as handle:
        lines = (line.rstrip("\r\n") for line in handle)
        pending: str | None = None
        for line in lines:
            if line.strip():
                pending = line
                break
        while pending is not None:
            if pending.startswith("@"):
                record, pending = _read_fastq(lines, pending[1:])
                yield record
                continue
            if not pending.startswith(">"):
                raise ValueError(f"Expected a record header, found {pending!r}")
            header = pending[1:]
            parts: list[str] = []
            pending = None
            for line in lines:
                if line.startswith((">", "@")):
                    pending = line
                    break
                parts.append(line.strip())
            yield FastaRecord(header, "".join(parts))


def write_fasta(path: str | os.PathLike, records: Iterable[FastaRecord]) -> None:
    """Write records as FASTA with sequences wrapped at 80 letters per line."""
    with open(path, "w", encoding="ascii") as handle:
        for record in records:
            handle.write(f">{record.id}\n")
            sequence = record.sequence
            if not sequence:
                handle.write("\n")
                continue
            for begin in range(0, len(sequence), _LINE_WIDTH):
                handle.write(sequence[begin : begin + _LINE_WIDTH] + "\n")