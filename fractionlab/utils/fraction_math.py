"""
Fraction arithmetic helpers.

Provides:
- gcd / lcm over positive integers
- simplify to lowest terms
- decimal conversion and "a/b" formatting
"""

from __future__ import annotations

from ..models.fraction import Fraction, InvalidFractionError


def gcd(a: int, b: int) -> int:
    """
    Greatest common divisor by Euclid's algorithm.

    Example:
        >>> gcd(12, 18)
        6
        >>> gcd(7, 0)
        7
    """
    while b:
        a, b = b, a % b
    return a


def lcm(a: int, b: int) -> int:
    """
    Least common multiple of two positive integers.

    Example:
        >>> lcm(4, 6)
        12
    """
    return a * b // gcd(a, b)


def simplify(fraction: Fraction) -> Fraction:
    """
    Reduce a fraction to lowest terms.

    Raises:
        InvalidFractionError: If the denominator is zero
    """
    if fraction.denominator == 0:
        raise InvalidFractionError("cannot simplify a fraction with zero denominator")
    divisor = gcd(fraction.numerator, fraction.denominator)
    return Fraction(fraction.numerator // divisor, fraction.denominator // divisor)


def to_decimal(fraction: Fraction) -> float:
    """Floating-point value of the fraction."""
    return fraction.numerator / fraction.denominator


def format_fraction(fraction: Fraction) -> str:
    """Format as 'numerator/denominator' without simplifying."""
    return f"{fraction.numerator}/{fraction.denominator}"


def scale_to_denominator(fraction: Fraction, denominator: int) -> Fraction:
    """
    Rewrite a fraction over a multiple of its denominator.

    Example:
        >>> scale_to_denominator(Fraction(3, 4), 12)
        Fraction(numerator=9, denominator=12)
    """
    if denominator % fraction.denominator:
        raise ValueError(
            f"{denominator} is not a multiple of {fraction.denominator}"
        )
    factor = denominator // fraction.denominator
    return Fraction(fraction.numerator * factor, denominator)
