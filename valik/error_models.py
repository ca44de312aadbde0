"""Probabilistic models of how sequencing errors destroy minimisers.

All probabilities are natural logarithms.
"""

from __future__ import annotations

import functools
import math
from typing import Sequence

NEGATIVE_INF = -math.inf


def _safe_log(value: float) -> float:
    return math.log(value) if value > 0 else NEGATIVE_INF


def _log_add(log_x: float, log_y: float) -> float:
    """log(exp(log_x) + exp(log_y))."""
    largest = max(log_x, log_y)
    if largest == NEGATIVE_INF:
        return NEGATIVE_INF
    return largest + math.log1p(math.exp(-abs(log_x - log_y)))


def _log_subtract(log_x: float, log_y: float) -> float:
    """log(exp(log_x) - exp(log_y)) for log_x >= log_y."""
    largest = max(log_x, log_y)
    difference = abs(log_x - log_y)
    if difference == 0:
        return NEGATIVE_INF
    return largest + math.log1p(-math.exp(-difference))


def pascal_row(n: int) -> list[float]:
    """Logarithms of the coefficients of row n of Pascal's triangle.

    Successive ratios are taken with integer division.
    """
    result = [0.0]
    for i in range(1, n + 1):
        result.append(result[-1] + _safe_log((n + 1 - i) // i))
    return result


def one_error_model(
    kmer_size: int,
    p_mean: float,
    affected_by_one_error_indirectly_prob: Sequence[float],
) -> list[float]:
    """Probabilities that one error affects 0..w minimisers, directly or indirectly.

    p_mean is the log probability that a minimiser starts at a given position;
    the indirect probabilities have w + 1 entries.
    """
    window_size = len(affected_by_one_error_indirectly_prob) - 1
    coefficients = pascal_row(kmer_size)
    probabilities = [NEGATIVE_INF] * (window_size + 1)
    inv_p_mean = _log_subtract(0.0, p_mean)

    for i in range(kmer_size + 1):
        p_direct = coefficients[i] + i * p_mean + (kmer_size - i) * inv_p_mean
        for j in range(window_size + 1 - i):
            probabilities[i + j] = _log_add(
                probabilities[i + j], p_direct + affected_by_one_error_indirectly_prob[j]
            )

    total = functools.reduce(_log_add, probabilities, NEGATIVE_INF)
    return [x - total for x in probabilities]


def _enumerate(
    minimisers_to_affect: int,
    affected_by_one_error_prob: Sequence[float],
    affected_by_error: list[int],
    current_error: int,
) -> float:
    """Log probability of all ways errors from current_error on affect exactly this many minimisers."""
    if minimisers_to_affect == 0:
        current_prob = sum(affected_by_one_error_prob[count] for count in affected_by_error[:current_error])
        current_prob += (len(affected_by_error) - current_error) * affected_by_one_error_prob[0]
        return current_prob

    if current_error >= len(affected_by_error):
        return NEGATIVE_INF

    result = NEGATIVE_INF
    for i in range(min(minimisers_to_affect + 1, len(affected_by_one_error_prob))):
        affected_by_error[current_error] = i
        result = _log_add(
            result,
            _enumerate(minimisers_to_affect - i, affected_by_one_error_prob, affected_by_error, current_error + 1),
        )
    return result


def multiple_error_model(
    number_of_minimisers: int,
    errors: int,
    affected_by_one_error_prob: Sequence[float],
) -> list[float]:
    """Probabilities that the given number of errors affects 0..max minimisers."""
    window_size = len(affected_by_one_error_prob) - 1
    max_affected = min(max(errors * window_size, 0), number_of_minimisers)

    affected_by_e_errors = [
        _enumerate(i, affected_by_one_error_prob, [0] * errors, 0) for i in range(max_affected + 1)
    ]
    total = functools.reduce(_log_add, affected_by_e_errors, NEGATIVE_INF)
    return [x - total for x in affected_by_e_errors]