"""
Instructor - Worked-example lessons for the three comparison methods.

Each lesson has three steps: an introduction, a worked example computed from
the lesson's fractions, and a strategy tip. The learner may move back and
forth between steps; a lesson counts as understood only from its last step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..models.fraction import ComparisonMethod, Fraction
from ..utils.comparator import compare_cross_multiplication, compare_fractions
from ..utils.fraction_math import lcm, scale_to_denominator


HALF = Fraction(1, 2)

RELATION_WORDS = {"<": "less than", ">": "greater than", "=": "equal to"}

EXAMPLE_FRACTIONS: Dict[ComparisonMethod, tuple[Fraction, Fraction]] = {
    ComparisonMethod.BENCHMARK: (Fraction(1, 3), Fraction(2, 3)),
    ComparisonMethod.COMMON_DENOMINATOR: (Fraction(3, 4), Fraction(5, 6)),
    ComparisonMethod.CROSS_MULTIPLICATION: (Fraction(2, 5), Fraction(3, 7)),
}

INTRODUCTIONS = {
    ComparisonMethod.BENCHMARK: (
        "Benchmarks are helpful reference points: 0, 1/2, and 1."
    ),
    ComparisonMethod.COMMON_DENOMINATOR: (
        "Make the denominators the same, then compare the numerators."
    ),
    ComparisonMethod.CROSS_MULTIPLICATION: (
        "Multiply diagonally across and compare the products."
    ),
}

TIPS = {
    ComparisonMethod.BENCHMARK: (
        "Strategy: Compare each fraction to 1/2. If one is less than 1/2 and the "
        "other is greater, you immediately know which is larger!"
    ),
    ComparisonMethod.COMMON_DENOMINATOR: (
        "Tip: Always show your work! Write out the conversion steps clearly."
    ),
    ComparisonMethod.CROSS_MULTIPLICATION: (
        "Remember: Cross-multiplication works because you're comparing a/b with "
        "c/d by comparing a×d with b×c."
    ),
}


@dataclass(frozen=True)
class InstructionStep:
    """One screen of a lesson."""
    title: str
    lines: tuple[str, ...]


@dataclass(frozen=True)
class Lesson:
    """A method's lesson with its example pair and ordered steps."""
    method: ComparisonMethod
    fraction1: Fraction
    fraction2: Fraction
    steps: tuple[InstructionStep, ...]

    @property
    def last_step(self) -> int:
        return len(self.steps) - 1


def _benchmark_example(f1: Fraction, f2: Fraction) -> List[str]:
    rel1 = compare_cross_multiplication(f1, HALF)
    rel2 = compare_cross_multiplication(f2, HALF)
    result = compare_fractions(f1, f2, ComparisonMethod.BENCHMARK)
    return [
        f"{f1} is {RELATION_WORDS[rel1]} 1/2 (benchmark)",
        f"{f2} is {RELATION_WORDS[rel2]} 1/2 (benchmark)",
        f"Since {f1} {rel1} 1/2 and {f2} {rel2} 1/2, we know: {f1} {result} {f2}",
    ]


def _common_denominator_example(f1: Fraction, f2: Fraction) -> List[str]:
    common = lcm(f1.denominator, f2.denominator)
    scaled1 = scale_to_denominator(f1, common)
    scaled2 = scale_to_denominator(f2, common)
    factor1 = common // f1.denominator
    factor2 = common // f2.denominator
    result = compare_fractions(f1, f2, ComparisonMethod.COMMON_DENOMINATOR)
    return [
        f"{f1.denominator} and {f2.denominator} → The LCM is {common}",
        f"{f1} = ({f1.numerator} × {factor1})/({f1.denominator} × {factor1}) = {scaled1}",
        f"{f2} = ({f2.numerator} × {factor2})/({f2.denominator} × {factor2}) = {scaled2}",
        f"Since {scaled1.numerator} {result} {scaled2.numerator}, we have: {f1} {result} {f2}",
    ]


def _cross_multiplication_example(f1: Fraction, f2: Fraction) -> List[str]:
    left = f1.numerator * f2.denominator
    right = f2.numerator * f1.denominator
    result = compare_fractions(f1, f2, ComparisonMethod.CROSS_MULTIPLICATION)
    return [
        f"{f1} ? {f2}",
        f"{f1.numerator} × {f2.denominator} = {left} (left fraction)",
        f"{f2.numerator} × {f1.denominator} = {right} (right fraction)",
        f"Since {left} {result} {right}, we have: {f1} {result} {f2}",
        "Rule: If left product < right product, then left fraction < right fraction",
    ]


_EXAMPLE_BUILDERS = {
    ComparisonMethod.BENCHMARK: _benchmark_example,
    ComparisonMethod.COMMON_DENOMINATOR: _common_denominator_example,
    ComparisonMethod.CROSS_MULTIPLICATION: _cross_multiplication_example,
}


def worked_example(method: ComparisonMethod, f1: Fraction, f2: Fraction) -> List[str]:
    """Step-by-step lines comparing f1 and f2 with the given method."""
    return _EXAMPLE_BUILDERS[ComparisonMethod(method)](f1, f2)


class Instructor:
    """Builds and caches the lesson for each comparison method."""

    def __init__(self):
        self._lessons: Dict[ComparisonMethod, Lesson] = {}

    def lesson_for(self, method: ComparisonMethod) -> Lesson:
        method = ComparisonMethod(method)
        if method not in self._lessons:
            f1, f2 = EXAMPLE_FRACTIONS[method]
            self._lessons[method] = Lesson(
                method=method,
                fraction1=f1,
                fraction2=f2,
                steps=(
                    InstructionStep("Introduction", (INTRODUCTIONS[method],)),
                    InstructionStep("Worked example", tuple(worked_example(method, f1, f2))),
                    InstructionStep("Strategy", (TIPS[method],)),
                ),
            )
        return self._lessons[method]
