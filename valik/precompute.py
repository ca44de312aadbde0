"""Precomputed probabilistic thresholds and their false-positive corrections."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from valik.error_models import (
    NEGATIVE_INF,
    _log_add,
    _safe_log,
    multiple_error_model,
    one_error_model,
    pascal_row,
)

_U64 = struct.Struct("<Q")


@dataclass(frozen=True)
class ThresholdParameters:
    """Parameters that determine the minimiser threshold of a query pattern.

    shape is a string of 1s and 0s; its length is the k-mer size.
    """

    window_size: int
    shape: str
    query_length: int
    errors: int = 0
    tau: float = 0.9999
    p_max: float = 0.15
    fpr: float = 0.05
    percentage: float = math.nan
    output_directory: Path = field(default_factory=Path)
    cache_thresholds: bool = False

    def __post_init__(self) -> None:
        if not self.shape or set(self.shape) - {"0", "1"}:
            raise ValueError(f"Invalid shape {self.shape!r}")

    @property
    def kmer_size(self) -> int:
        return len(self.shape)

    @property
    def shape_value(self) -> int:
        return int(self.shape, 2)


def _strip_zero_points(name: str, times: int) -> str:
    for _ in range(times):
        name = name.replace("0.", "", 1)
    return name


def correction_filename(parameters: ThresholdParameters) -> str:
    """Cache file name of the corrections for these parameters."""
    p = parameters
    name = (
        f"correction_{p.query_length:x}_{p.window_size:x}_{p.shape_value:x}_"
        f"{p.p_max:g}_{p.fpr:g}.bin"
    )
    return _strip_zero_points(name, 2)


def threshold_filename(parameters: ThresholdParameters) -> str:
    """Cache file name of the thresholds for these parameters."""
    p = parameters
    name = (
        f"threshold_{p.query_length:x}_{p.window_size:x}_{p.shape_value:x}_"
        f"{p.errors & 0xFFFF:x}_{p.tau:g}.bin"
    )
    return _strip_zero_points(name, 1)


def _read_cache(path: Path, parameters: ThresholdParameters) -> list[int] | None:
    if not parameters.cache_thresholds or not path.exists():
        return None
    data = path.read_bytes()
    (count,) = _U64.unpack_from(data, 0)
    if len(data) < _U64.size * (count + 1):
        raise ValueError(f"Truncated cache file {path}")
    return [value for (value,) in _U64.iter_unpack(data[_U64.size : _U64.size * (count + 1)])]


def _write_cache(path: Path, values: Sequence[int], parameters: ThresholdParameters) -> None:
    if not parameters.cache_thresholds:
        return
    path.write_bytes(_U64.pack(len(values)) + b"".join(_U64.pack(value) for value in values))


def _minimiser_range(parameters: ThresholdParameters) -> tuple[int, int, int]:
    """Check the parameters; return k-mers per pattern and min / max minimiser count."""
    k = parameters.kmer_size
    if parameters.window_size == k:
        raise ValueError("Window size equals k-mer size: use the k-mer lemma.")
    if not math.isnan(parameters.percentage):
        raise ValueError("A percentage threshold was requested.")
    if parameters.window_size < k or parameters.query_length < parameters.window_size:
        raise ValueError("Window must cover the k-mer and fit into the query.")
    kmers_per_window = parameters.window_size - k + 1
    kmers_per_pattern = parameters.query_length - k + 1
    minimal = kmers_per_pattern // kmers_per_window
    maximal = parameters.query_length - parameters.window_size + 1
    return kmers_per_pattern, minimal, maximal


def precompute_correction(parameters: ThresholdParameters) -> list[int]:
    """Expected false-positive minimiser hits for each possible minimiser count."""
    _, minimal, maximal = _minimiser_range(parameters)
    cache = Path(parameters.output_directory) / correction_filename(parameters)
    cached = _read_cache(cache, parameters)
    if cached is not None:
        return cached

    fpr = math.log(parameters.fpr)
    inv_fpr = math.log(1.0 - parameters.fpr)
    log_p_max = math.log(parameters.p_max)

    correction = []
    for number_of_minimisers in range(minimal, maximal + 1):
        coefficients = pascal_row(number_of_minimisers)
        number_of_fp = 1
        while (
            number_of_fp <= number_of_minimisers
            and coefficients[number_of_fp]
            + number_of_fp * fpr
            + (number_of_minimisers - number_of_fp) * inv_fpr
            >= log_p_max
        ):
            number_of_fp += 1
        correction.append(number_of_fp - 1)

    _write_cache(cache, correction, parameters)
    return correction


def precompute_threshold(parameters: ThresholdParameters, indirect_error_prob: Sequence[float]) -> list[int]:
    """Minimiser thresholds for each possible minimiser count.

    indirect_error_prob holds the log probabilities that one error indirectly
    affects 0..window_size minimisers.
    """
    kmers_per_pattern, minimal, maximal = _minimiser_range(parameters)
    cache = Path(parameters.output_directory) / threshold_filename(parameters)
    cached = _read_cache(cache, parameters)
    if cached is not None:
        return cached

    log_tau = math.log(parameters.tau)
    thresholds = []
    for number_of_minimisers in range(minimal, maximal + 1):
        uniform_start_index_prob = _safe_log(number_of_minimisers) - math.log(kmers_per_pattern)
        affected_by_one = one_error_model(parameters.kmer_size, uniform_start_index_prob, indirect_error_prob)
        affected_by_e = multiple_error_model(number_of_minimisers, parameters.errors, affected_by_one)

        max_affected = next(
            (i for i, x in enumerate(affected_by_e) if x == NEGATIVE_INF), len(affected_by_e) - 1
        )
        cumulative = affected_by_e[0]
        affected = 0
        while cumulative < log_tau and affected < max_affected:
            affected += 1
            cumulative = _log_add(cumulative, affected_by_e[affected])

        thresholds.append(number_of_minimisers - affected)

    _write_cache(cache, thresholds, parameters)
    return thresholds