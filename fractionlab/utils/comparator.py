"""
Fraction comparison strategies.

Three independent methods, each returning '<', '=' or '>':
- cross multiplication: exact, the default and the fallback
- common denominator: exact, scales both fractions to the LCM
- benchmark: heuristic against 0, 1/2 and 1; may be inconclusive

compare_fractions() dispatches to a method and always returns a definite
answer. The benchmark heuristic is exposed as try_benchmark(), which returns
None when it cannot decide.
"""

from __future__ import annotations

from typing import Optional, Union

from ..models.fraction import Comparison, ComparisonMethod, Fraction
from .fraction_math import lcm, to_decimal


BENCHMARKS: tuple[float, ...] = (0.0, 0.5, 1.0)
NEAR_BENCHMARK = 0.1  # fraction1 must be closer than this to the benchmark
FAR_FROM_BENCHMARK = 0.2  # fraction2 must be farther than this from it
BELOW_HALF = 0.4
ABOVE_HALF = 0.6


def _sign(left: int, right: int) -> Comparison:
    if left > right:
        return ">"
    if left < right:
        return "<"
    return "="


def compare_cross_multiplication(f1: Fraction, f2: Fraction) -> Comparison:
    """Compare n1*d2 against n2*d1."""
    return _sign(f1.numerator * f2.denominator, f2.numerator * f1.denominator)


def compare_common_denominator(f1: Fraction, f2: Fraction) -> Comparison:
    """Scale both fractions to lcm(d1, d2) and compare the numerators."""
    common = lcm(f1.denominator, f2.denominator)
    scaled1 = f1.numerator * (common // f1.denominator)
    scaled2 = f2.numerator * (common // f2.denominator)
    return _sign(scaled1, scaled2)


def try_benchmark(f1: Fraction, f2: Fraction) -> Optional[Comparison]:
    """
    Approximate comparison using the benchmarks 0, 1/2 and 1.

    Returns:
        '<' or '>' when the heuristic is conclusive, otherwise None.
        Never returns '='.
    """
    val1 = to_decimal(f1)
    val2 = to_decimal(f2)

    for benchmark in BENCHMARKS:
        diff1 = abs(val1 - benchmark)
        diff2 = abs(val2 - benchmark)
        if diff1 < NEAR_BENCHMARK and diff2 > FAR_FROM_BENCHMARK:
            if val1 < benchmark < val2:
                return "<"
            if val2 < benchmark < val1:
                return ">"

    # One clearly below one half, the other clearly above
    if val1 < BELOW_HALF and val2 > ABOVE_HALF:
        return "<"
    if val1 > ABOVE_HALF and val2 < BELOW_HALF:
        return ">"

    return None


def compare_benchmark(f1: Fraction, f2: Fraction) -> Comparison:
    """Benchmark comparison, falling back to cross multiplication when inconclusive."""
    result = try_benchmark(f1, f2)
    if result is not None:
        return result
    return compare_cross_multiplication(f1, f2)


_STRATEGIES = {
    ComparisonMethod.BENCHMARK: compare_benchmark,
    ComparisonMethod.COMMON_DENOMINATOR: compare_common_denominator,
    ComparisonMethod.CROSS_MULTIPLICATION: compare_cross_multiplication,
}


def compare_fractions(
    f1: Fraction,
    f2: Fraction,
    method: Optional[Union[ComparisonMethod, str]] = None,
) -> Comparison:
    """
    Compare two fractions with the requested method.

    Args:
        f1: Left-hand fraction
        f2: Right-hand fraction
        method: Comparison method (default: cross multiplication)

    Returns:
        '<', '=' or '>' describing f1 relative to f2

    Raises:
        ValueError: If method is not a known ComparisonMethod

    Example:
        >>> compare_fractions(Fraction(2, 4), Fraction(1, 2), "benchmark")
        '='
    """
    if method is None:
        return compare_cross_multiplication(f1, f2)
    return _STRATEGIES[ComparisonMethod(method)](f1, f2)
