"""Option groups for local alignment search."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from valik.fraction import Fraction

_SIZE_MAX = 2**64 - 1


@dataclass
class DreamOptions:
    """Restricts a search to some reference sequences or to one segment of one sequence."""

    prefiltered_search: bool = False
    search_segment: bool = False
    reference_length: int = 0
    bin_sequences: list[int] = field(default_factory=list)
    segment_begin: int = 0
    segment_end: int = 0


@dataclass
class EpsMatchOptions:
    """Maximal error rate and minimal length of an epsilon match."""

    epsilon: Fraction = field(default_factory=lambda: Fraction(5, 100))
    num_epsilon: float = 0.05
    min_length: int = 100


@dataclass
class IndexOptions:
    """Q-gram length and abundance cut of the q-gram index."""

    q_gram: int = _SIZE_MAX
    qgram_abundance_cut: float = 1.0


class VerificationMethod(enum.Enum):
    """How seeds are verified."""

    ALL_LOCAL = 0
    BEST_LOCAL = 1

    def __str__(self) -> str:
        return _METHOD_NAMES[self]


_METHOD_NAMES = {
    VerificationMethod.ALL_LOCAL: "exact",
    VerificationMethod.BEST_LOCAL: "bestLocal",
}


@dataclass
class VerifierOptions:
    """X-drop and verification strategy."""

    x_drop: float = 5.0
    str_verification_method: str = "exact"
    verification_method: VerificationMethod = VerificationMethod.ALL_LOCAL