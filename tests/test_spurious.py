import pytest

from valik.spurious import PATTERNS_PER_SEGMENT, max_segment_len, segment_fpr


def test_segment_fpr_no_spurious_patterns():
    assert segment_fpr(0.0, 500) == 0.0


def test_segment_fpr_certain_spurious_pattern():
    assert segment_fpr(1.0, 10) == 1.0


def test_segment_fpr_single_pattern_is_pattern_probability():
    assert segment_fpr(0.25, 1) == pytest.approx(0.25)


def test_segment_fpr_zero_patterns():
    assert segment_fpr(0.3, 0) == 0.0


@pytest.mark.parametrize("pattern_p", [0.0001, 0.01, 0.2])
def test_segment_fpr_grows_with_pattern_count(pattern_p):
    values = [segment_fpr(pattern_p, n) for n in (1, 10, 100, 1000)]
    assert values == sorted(values)
    assert all(0.0 <= value <= 1.0 for value in values)


def test_segment_fpr_grows_with_pattern_probability():
    values = [segment_fpr(p, 50) for p in (0.0, 0.001, 0.01, 0.1, 0.5)]
    assert values == sorted(values)


def test_max_segment_len_spans_minimum_pattern_count():
    assert max_segment_len(0.01, 50, 1) == 50 + (PATTERNS_PER_SEGMENT - 1)


def test_max_segment_len_ignores_pattern_probability():
    assert max_segment_len(0.0, 100, 3) == max_segment_len(0.9, 100, 3)


def test_max_segment_len_scales_with_query_every():
    short = max_segment_len(0.01, 50, 1)
    long = max_segment_len(0.01, 50, 2)
    assert long - short == PATTERNS_PER_SEGMENT - 1