"""
Unit tests for the comparison strategies and the dispatcher.

Tests:
- Exactness equivalence of cross multiplication and common denominator
- Equal values across different denominators under every method
- Benchmark heuristic and its cross-multiplication fallback
"""

import itertools

import pytest

from fractionlab.models.fraction import ComparisonMethod, Fraction
from fractionlab.utils.comparator import (
    compare_benchmark,
    compare_common_denominator,
    compare_cross_multiplication,
    compare_fractions,
    try_benchmark,
)

ALL_FRACTIONS = [Fraction(n, d) for d in range(1, 13) for n in range(1, d + 1)]


class TestExactMethods:
    """Cross multiplication and common denominator."""

    def test_cross_multiplication(self):
        assert compare_cross_multiplication(Fraction(2, 5), Fraction(3, 7)) == "<"
        assert compare_cross_multiplication(Fraction(3, 4), Fraction(2, 3)) == ">"
        assert compare_cross_multiplication(Fraction(3, 6), Fraction(4, 8)) == "="

    def test_common_denominator(self):
        assert compare_common_denominator(Fraction(3, 4), Fraction(5, 6)) == "<"
        assert compare_common_denominator(Fraction(5, 6), Fraction(3, 4)) == ">"

    def test_exact_methods_agree_on_all_pairs(self):
        for f1, f2 in itertools.product(ALL_FRACTIONS, repeat=2):
            assert compare_cross_multiplication(f1, f2) == compare_common_denominator(f1, f2)


class TestEquivalentFractions:
    """Same value, different representation."""

    @pytest.mark.parametrize("method", list(ComparisonMethod))
    def test_two_quarters_equals_one_half(self, method):
        assert compare_fractions(Fraction(2, 4), Fraction(1, 2), method) == "="
        assert compare_fractions(Fraction(1, 2), Fraction(2, 4), method) == "="

    @pytest.mark.parametrize("method", list(ComparisonMethod))
    def test_fraction_equals_itself(self, method):
        for f in ALL_FRACTIONS:
            assert compare_fractions(f, f, method) == "="

    @pytest.mark.parametrize("method", list(ComparisonMethod))
    def test_scaled_copies_are_equal(self, method):
        for f in ALL_FRACTIONS:
            scaled = Fraction(f.numerator * 3, f.denominator * 3)
            assert compare_fractions(f, scaled, method) == "="


class TestBenchmark:
    """Benchmark heuristic (0, 1/2, 1) with inconclusive fallback."""

    def test_near_benchmark_opposite_sides(self):
        # 9/20 is within 0.1 of 1/2, 4/5 is more than 0.2 above it
        assert try_benchmark(Fraction(9, 20), Fraction(4, 5)) == "<"
        # 11/20 is just above 1/2, 1/5 is far below it
        assert try_benchmark(Fraction(11, 20), Fraction(1, 5)) == ">"

    def test_near_benchmark_same_side_is_not_decisive(self):
        # 19/20 is near 1 but 1/2 is on the same side of it; 1/2 is not below 0.4
        assert try_benchmark(Fraction(19, 20), Fraction(1, 2)) is None
        assert compare_fractions(Fraction(19, 20), Fraction(1, 2), "benchmark") == ">"

    def test_clearly_either_side_of_half(self):
        assert try_benchmark(Fraction(1, 3), Fraction(2, 3)) == "<"
        assert try_benchmark(Fraction(5, 6), Fraction(1, 4)) == ">"

    def test_inconclusive_returns_none(self):
        # Both between 0.4 and 0.6 and neither near a benchmark with a far partner
        assert try_benchmark(Fraction(3, 7), Fraction(4, 7)) is None
        assert try_benchmark(Fraction(2, 3), Fraction(3, 4)) is None

    def test_never_returns_equal(self):
        for f1, f2 in itertools.product(ALL_FRACTIONS, repeat=2):
            assert try_benchmark(f1, f2) != "="

    def test_fallback_matches_cross_multiplication(self):
        for f1, f2 in itertools.product(ALL_FRACTIONS, repeat=2):
            if try_benchmark(f1, f2) is None:
                assert compare_benchmark(f1, f2) == compare_cross_multiplication(f1, f2)

    def test_dispatcher_result_is_never_wrong_for_proper_fractions(self):
        proper = [f for f in ALL_FRACTIONS if f.numerator < f.denominator]
        for f1, f2 in itertools.product(proper, repeat=2):
            assert compare_fractions(f1, f2, "benchmark") == compare_cross_multiplication(f1, f2)


class TestDispatcher:
    """Routing and defaults."""

    def test_default_is_cross_multiplication(self):
        assert compare_fractions(Fraction(2, 5), Fraction(3, 7)) == "<"

    def test_accepts_string_method(self):
        assert compare_fractions(Fraction(3, 4), Fraction(5, 6), "common-denominator") == "<"

    def test_unknown_method_rejected(self):
        with pytest.raises(ValueError):
            compare_fractions(Fraction(1, 2), Fraction(1, 3), "guessing")
