"""
Unit tests for the Fraction value type and fraction arithmetic.
"""

import unittest

from fractionlab.models.fraction import ComparisonMethod, Fraction, InvalidFractionError
from fractionlab.utils.fraction_math import (
    format_fraction,
    gcd,
    lcm,
    scale_to_denominator,
    simplify,
    to_decimal,
)


class TestFraction(unittest.TestCase):
    """Test the Fraction input contract."""

    def test_valid_fraction(self):
        f = Fraction(3, 4)
        self.assertEqual(f.numerator, 3)
        self.assertEqual(f.denominator, 4)
        self.assertEqual(str(f), "3/4")

    def test_zero_denominator_rejected(self):
        with self.assertRaises(InvalidFractionError):
            Fraction(1, 0)

    def test_non_positive_terms_rejected(self):
        for numerator, denominator in [(0, 3), (-1, 3), (1, -3)]:
            with self.subTest(numerator=numerator, denominator=denominator):
                with self.assertRaises(InvalidFractionError):
                    Fraction(numerator, denominator)

    def test_non_integer_terms_rejected(self):
        with self.assertRaises(InvalidFractionError):
            Fraction(1.5, 2)
        with self.assertRaises(InvalidFractionError):
            Fraction(True, 2)

    def test_invalid_fraction_error_is_value_error(self):
        self.assertTrue(issubclass(InvalidFractionError, ValueError))

    def test_immutable(self):
        f = Fraction(1, 2)
        with self.assertRaises(AttributeError):
            f.numerator = 3

    def test_not_reduced_on_construction(self):
        self.assertEqual(Fraction(2, 4).numerator, 2)
        self.assertNotEqual(Fraction(2, 4), Fraction(1, 2))

    def test_dict_round_trip(self):
        f = Fraction(5, 6)
        self.assertEqual(f.to_dict(), {"numerator": 5, "denominator": 6})
        self.assertEqual(Fraction.from_dict(f.to_dict()), f)

    def test_parse(self):
        self.assertEqual(Fraction.parse(" 7/12 "), Fraction(7, 12))
        with self.assertRaises(InvalidFractionError):
            Fraction.parse("7")
        with self.assertRaises(InvalidFractionError):
            Fraction.parse("a/b")

    def test_method_labels(self):
        self.assertEqual(ComparisonMethod.COMMON_DENOMINATOR.label, "common denominator")
        self.assertEqual(ComparisonMethod("benchmark"), ComparisonMethod.BENCHMARK)


class TestArithmetic(unittest.TestCase):
    """Test gcd, lcm, simplify, decimal conversion and formatting."""

    def test_gcd(self):
        self.assertEqual(gcd(12, 18), 6)
        self.assertEqual(gcd(7, 13), 1)
        self.assertEqual(gcd(7, 0), 7)

    def test_lcm(self):
        self.assertEqual(lcm(4, 6), 12)
        self.assertEqual(lcm(5, 7), 35)
        self.assertEqual(lcm(3, 9), 9)

    def test_simplify(self):
        self.assertEqual(simplify(Fraction(6, 8)), Fraction(3, 4))
        self.assertEqual(simplify(Fraction(5, 7)), Fraction(5, 7))
        self.assertEqual(simplify(Fraction(4, 4)), Fraction(1, 1))

    def test_simplify_idempotent(self):
        for n in range(1, 13):
            for d in range(1, 13):
                f = Fraction(n, d)
                with self.subTest(fraction=str(f)):
                    self.assertEqual(simplify(simplify(f)), simplify(f))

    def test_to_decimal(self):
        self.assertAlmostEqual(to_decimal(Fraction(1, 4)), 0.25)
        self.assertAlmostEqual(to_decimal(Fraction(2, 3)), 0.6666666, places=6)

    def test_format_does_not_simplify(self):
        self.assertEqual(format_fraction(Fraction(2, 4)), "2/4")

    def test_scale_to_denominator(self):
        self.assertEqual(scale_to_denominator(Fraction(3, 4), 12), Fraction(9, 12))
        with self.assertRaises(ValueError):
            scale_to_denominator(Fraction(3, 4), 10)


if __name__ == "__main__":
    unittest.main()
