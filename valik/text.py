"""Small text helpers."""

from __future__ import annotations


def split_line(line: str, delim: str) -> list[str]:
    """Split a line into fields; a trailing delimiter does not add an empty field."""
    fields = line.split(delim)
    if fields[-1] == "":
        fields.pop()
    return fields