"""Estimates of spurious matches between query segments and reference bins."""

from __future__ import annotations

FPR_UPPER = 0.001
FNR_UPPER = 0.15
THRESH_LOWER = 2
PATTERNS_PER_SEGMENT = 1000


def segment_fpr(pattern_p: float, patterns_per_segment: int) -> float:
    """Probability that any of the partially overlapping patterns of a segment matches spuriously."""
    none_match_p = (1 - pattern_p) ** patterns_per_segment
    return min(1 - none_match_p, 1.0)


def max_segment_len(pattern_p: float, pattern_size: int, query_every: int) -> int:
    """The longest query segment that does not appear spuriously in reference bins.

    Uses the minimum number of patterns per segment; pattern_p does not change
    the result.
    """
    return pattern_size + query_every * (PATTERNS_PER_SEGMENT - 1)