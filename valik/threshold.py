"""The number of matching minimisers needed for a likely local match."""

from __future__ import annotations

import enum
import math
from typing import Sequence

from valik.precompute import ThresholdParameters, precompute_correction, precompute_threshold


class ThresholdKind(enum.Enum):
    LEMMA = "lemma"
    PERCENTAGE = "percentage"
    PROBABILISTIC = "probabilistic"


class Threshold:
    """Threshold by k-mer lemma, fixed percentage or precomputed probabilities."""

    def __init__(
        self,
        parameters: ThresholdParameters,
        indirect_error_prob: Sequence[float] | None = None,
    ) -> None:
        kmer_size = parameters.kmer_size
        kmers_per_window = parameters.window_size - kmer_size + 1
        self.kmer_lemma = 0
        self.percentage = math.nan
        self.minimal_number_of_minimizers = 0
        self.maximal_number_of_minimizers = 0
        self.correction: list[int] = []
        self.thresholds: list[int] = []

        if not math.isnan(parameters.percentage):
            self.kind = ThresholdKind.PERCENTAGE
            self.percentage = parameters.percentage
        elif kmers_per_window == 1:
            self.kind = ThresholdKind.LEMMA
            minuend = parameters.query_length + 1
            subtrahend = (parameters.errors + 1) * kmer_size
            self.kmer_lemma = minuend - subtrahend if minuend > subtrahend else 1
        else:
            if indirect_error_prob is None:
                raise ValueError("Probabilistic thresholds need the indirect error probabilities.")
            self.kind = ThresholdKind.PROBABILISTIC
            kmers_per_pattern = parameters.query_length - kmer_size + 1
            self.minimal_number_of_minimizers = kmers_per_pattern // kmers_per_window
            self.maximal_number_of_minimizers = parameters.query_length - parameters.window_size + 1
            self.correction = precompute_correction(parameters)
            self.thresholds = precompute_threshold(parameters, indirect_error_prob)

    def get(self, minimiser_count: int) -> int:
        """The threshold for a pattern containing minimiser_count minimisers."""
        if self.kind is ThresholdKind.LEMMA:
            return self.kmer_lemma
        if self.kind is ThresholdKind.PERCENTAGE:
            return max(1, int(miniser_count_product(minimiser_count, self.percentage)))
        clamped = min(max(minimiser_count, self.minimal_number_of_minimizers), self.maximal_number_of_minimizers)
        index = clamped - self.minimal_number_of_minimizers
        return max(1, self.thresholds[index] + self.correction[index])


def minimiser_count_product(count: int, percentage: float) -> float:
    return count * percentage


minimiser_count_product.__doc__ = "The share of minimisers required by a percentage threshold."
miniser_count_product = minimiser_count_product