"""Accumulated running times of the search stages and their report."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, TextIO, TypeVar

T = TypeVar("T")

_MILLISECOND = timedelta(milliseconds=1)


@dataclass
class Runtime:
    """An accumulated duration."""

    duration: timedelta = field(default_factory=timedelta)

    def measure_time(self, execute: Callable[[], T]) -> T:
        """Run execute, add its running time and return its result."""
        start = self.now()
        value = execute()
        self.manual_timing(start)
        return value

    @staticmethod
    def now() -> int:
        """A monotonic time point in nanoseconds."""
        return time.perf_counter_ns()

    def manual_timing(self, value: timedelta | int) -> None:
        """Add a duration, or the time elapsed since a time point from now()."""
        if isinstance(value, timedelta):
            self.duration += value
        else:
            self.duration += timedelta(microseconds=(self.now() - value) / 1000)

    def milliseconds(self) -> int:
        """Whole milliseconds accumulated."""
        return self.duration // _MILLISECOND


def _total(*parts: Runtime) -> Runtime:
    total = Runtime()
    total.manual_timing(sum((part.duration for part in parts), timedelta()))
    return total


@dataclass
class BestExtensionTime(Runtime):
    banded_needleman_wunsch_time: Runtime = field(default_factory=Runtime)
    banded_needleman_wunsch_left_time: Runtime = field(default_factory=Runtime)
    banded_needleman_wunsch_right_time: Runtime = field(default_factory=Runtime)
    longest_eps_match_time: Runtime = field(default_factory=Runtime)
    construct_seed_alignment_time: Runtime = field(default_factory=Runtime)

    def total_time(self) -> Runtime:
        return _total(
            self.banded_needleman_wunsch_time,
            self.longest_eps_match_time,
            self.construct_seed_alignment_time,
        )


@dataclass
class ExtensionTime(Runtime):
    extend_seed_time: Runtime = field(default_factory=Runtime)
    best_extension_time: BestExtensionTime = field(default_factory=BestExtensionTime)

    def total_time(self) -> Runtime:
        return _total(self.extend_seed_time, self.best_extension_time)


@dataclass
class VerificationTime(Runtime):
    next_local_alignment_time: Runtime = field(default_factory=Runtime)
    split_at_x_drops_time: Runtime = field(default_factory=Runtime)
    extension_time: ExtensionTime = field(default_factory=ExtensionTime)

    def total_time(self) -> Runtime:
        return _total(self.next_local_alignment_time, self.split_at_x_drops_time, self.extension_time)


@dataclass
class KernelRuntime(Runtime):
    swift_filter_time: Runtime = field(default_factory=Runtime)
    verification_time: VerificationTime = field(default_factory=VerificationTime)

    def total_time(self) -> Runtime:
        return _total(self.swift_filter_time, self.verification_time)


@dataclass
class StrandTime(Runtime):
    prefiltered_stellar_time: KernelRuntime = field(default_factory=KernelRuntime)
    post_process_eps_matches_time: Runtime = field(default_factory=Runtime)
    output_eps_matches_time: Runtime = field(default_factory=Runtime)

    def total_time(self) -> Runtime:
        return _total(
            self.prefiltered_stellar_time,
            self.post_process_eps_matches_time,
            self.output_eps_matches_time,
        )


@dataclass
class AppRuntime(Runtime):
    input_queries_time: Runtime = field(default_factory=Runtime)
    input_databases_time: Runtime = field(default_factory=Runtime)
    swift_index_construction_time: Runtime = field(default_factory=Runtime)
    forward_strand_stellar_time: StrandTime = field(default_factory=StrandTime)
    reverse_complement_database_time: Runtime = field(default_factory=Runtime)
    reverse_strand_stellar_time: StrandTime = field(default_factory=StrandTime)
    output_disabled_queries_time: Runtime = field(default_factory=Runtime)

    def total_time(self) -> Runtime:
        return _total(
            self.input_queries_time,
            self.input_databases_time,
            self.swift_index_construction_time,
            self.forward_strand_stellar_time,
            self.reverse_complement_database_time,
            self.reverse_strand_stellar_time,
            self.output_disabled_queries_time,
        )


def print_strand_time(strand_runtime: StrandTime, strand_direction: str, stream: TextIO) -> None:
    """Write the time report of one strand."""
    kernel = strand_runtime.prefiltered_stellar_time
    verification = kernel.verification_time
    extension = verification.extension_time
    best = extension.best_extension_time
    d = strand_direction
    lines = [
        f"       + Prefiltered Stellar Time ({d}): {kernel.milliseconds()}ms",
        f"          + Swift Filter Time ({d}): {kernel.swift_filter_time.milliseconds()}ms",
        f"          + Seed Verification Time ({d}): {verification.milliseconds()}ms",
        f"             + Find Next Local Alignment Time ({d}): "
        f"{verification.next_local_alignment_time.milliseconds()}ms",
        f"             + Split At X-Drops Time ({d}): {verification.split_at_x_drops_time.milliseconds()}ms",
        f"             + Extension Time ({d}): {extension.milliseconds()}ms",
        f"                + Extend Seed Time ({d}): {extension.extend_seed_time.milliseconds()}ms",
        f"                + Best Extension Time ({d}): {best.milliseconds()}ms",
        f"                   + Banded Needleman-Wunsch Time ({d}): "
        f"{best.banded_needleman_wunsch_time.milliseconds()}ms",
        f"                      + Banded Needleman-Wunsch (Left Extension) Time ({d}): "
        f"{best.banded_needleman_wunsch_left_time.milliseconds()}ms",
        f"                      + Banded Needleman-Wunsch (Right Extension) Time ({d}): "
        f"{best.banded_needleman_wunsch_right_time.milliseconds()}ms",
        f"                   + Longest EPS Match Time ({d}): {best.longest_eps_match_time.milliseconds()}ms",
        f"                   + Construct Alignment Time ({d}): "
        f"{best.construct_seed_alignment_time.milliseconds()}ms",
        f"                   = total time: {best.total_time().milliseconds()}ms",
        f"                = total time: {extension.total_time().milliseconds()}ms",
        f"             = total time: {verification.total_time().milliseconds()}ms",
        f"          = total time: {kernel.total_time().milliseconds()}ms",
        f"       + Post-Process Eps-Matches Time ({d}): "
        f"{strand_runtime.post_process_eps_matches_time.milliseconds()}ms",
        f"       + File Output Eps-Matches Time ({d}): {strand_runtime.output_eps_matches_time.milliseconds()}ms",
        f"       = total time: {strand_runtime.total_time().milliseconds()}ms",
    ]
    stream.write("".join(line + "\n" for line in lines))


def print_app_time(app_runtime: AppRuntime, stream: TextIO) -> None:
    """Write the full time report of a search."""
    t = app_runtime
    stream.write(f"Running time: {t.milliseconds()}ms\n")
    stream.write(f" * Stellar Application Time: {t.milliseconds()}ms\n")
    stream.write(f"    + File Input Queries Time: {t.input_queries_time.milliseconds()}ms\n")
    stream.write(f"    + File Input Databases Time: {t.input_databases_time.milliseconds()}ms\n")
    stream.write(f"    + SwiftFilter Construction Time: {t.swift_index_construction_time.milliseconds()}ms\n")
    stream.write(f"    + Stellar Forward Strand Time: {t.forward_strand_stellar_time.milliseconds()}ms\n")
    print_strand_time(t.forward_strand_stellar_time, "Forward", stream)
    stream.write(
        f"    + Database Reverse Complement Time: {t.reverse_complement_database_time.milliseconds()}ms\n"
    )
    stream.write(f"    + Stellar Reverse Strand Time: {t.reverse_strand_stellar_time.milliseconds()}ms\n")
    print_strand_time(t.reverse_strand_stellar_time, "Reverse", stream)
    stream.write(
        f"    + File Output Disabled Queries Time: {t.output_disabled_queries_time.milliseconds()}ms\n"
    )
    stream.write(f"    = total time: {t.total_time().milliseconds()}ms\n")