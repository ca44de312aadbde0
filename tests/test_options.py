import pytest

from valik.fraction import Fraction
from valik.options import (
    DreamOptions,
    EpsMatchOptions,
    IndexOptions,
    VerificationMethod,
    VerifierOptions,
)


def test_dream_defaults():
    options = DreamOptions()
    assert options.prefiltered_search is False
    assert options.search_segment is False
    assert options.reference_length == 0
    assert options.bin_sequences == []


def test_dream_bin_sequences_not_shared():
    first = DreamOptions()
    second = DreamOptions()
    first.bin_sequences.append(3)
    assert second.bin_sequences == []


def test_eps_match_defaults():
    options = EpsMatchOptions()
    assert (options.epsilon.numerator, options.epsilon.denominator) == (5, 100)
    assert float(options.epsilon) == options.num_epsilon
    assert options.min_length == 100


def test_eps_match_custom_epsilon():
    options = EpsMatchOptions(epsilon=Fraction(1, 50))
    assert float(options.epsilon) == 0.02


def test_index_defaults():
    options = IndexOptions()
    assert options.q_gram == 2**64 - 1
    assert options.qgram_abundance_cut == 1.0


@pytest.mark.parametrize(
    ("index", "expected"),
    [(0, "exact"), (1, "bestLocal")],
)
def test_verification_method_names(index, expected):
    method = VerificationMethod(index)
    assert method.__str__() == expected
    assert str(method) == expected


def test_verification_method_index():
    assert VerificationMethod(0) is VerificationMethod.ALL_LOCAL
    assert VerificationMethod(1) is VerificationMethod.BEST_LOCAL


def test_verifier_defaults():
    options = VerifierOptions()
    assert options.x_drop == 5
    assert options.str_verification_method == "exact"
    assert options.verification_method is VerificationMethod.ALL_LOCAL
    assert str(options.verification_method) == options.str_verification_method