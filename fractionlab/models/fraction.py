"""
Fraction value type and comparison vocabulary.

A Fraction is an immutable pair of positive integers. It is not reduced on
construction; use utils.fraction_math.simplify for lowest terms.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Literal


Comparison = Literal["<", "=", ">"]
COMPARISON_SYMBOLS: tuple[str, ...] = ("<", "=", ">")


class InvalidFractionError(ValueError):
    """Raised when a fraction violates its input contract (e.g. zero denominator)."""


class ComparisonMethod(str, Enum):
    """The three comparison strategies taught in every session."""

    BENCHMARK = "benchmark"
    COMMON_DENOMINATOR = "common-denominator"
    CROSS_MULTIPLICATION = "cross-multiplication"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. 'common denominator'."""
        return self.value.replace("-", " ")


# Order in which instruction presents the methods
METHOD_ORDER: tuple[ComparisonMethod, ...] = (
    ComparisonMethod.BENCHMARK,
    ComparisonMethod.COMMON_DENOMINATOR,
    ComparisonMethod.CROSS_MULTIPLICATION,
)


@dataclass(frozen=True)
class Fraction:
    """
    A proper or improper fraction with positive integer terms.

    Attributes:
        numerator: Integer >= 1
        denominator: Integer >= 1

    Raises:
        InvalidFractionError: If either term is not a positive integer
    """

    numerator: int
    denominator: int

    def __post_init__(self):
        for name in ("numerator", "denominator"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidFractionError(
                    f"{name} must be an integer, got {value!r}"
                )
        if self.denominator == 0:
            raise InvalidFractionError("denominator must not be zero")
        if self.denominator < 1:
            raise InvalidFractionError(
                f"denominator must be >= 1, got {self.denominator}"
            )
        if self.numerator < 1:
            raise InvalidFractionError(
                f"numerator must be >= 1, got {self.numerator}"
            )

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary for persistence."""
        return {"numerator": self.numerator, "denominator": self.denominator}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Fraction:
        """Create from a {'numerator', 'denominator'} dictionary."""
        return cls(numerator=data["numerator"], denominator=data["denominator"])

    @classmethod
    def parse(cls, text: str) -> Fraction:
        """
        Parse a fraction written as 'a/b'.

        Raises:
            InvalidFractionError: If text is not of the form 'a/b'
        """
        parts = text.strip().split("/")
        if len(parts) != 2:
            raise InvalidFractionError(f"Expected 'numerator/denominator', got {text!r}")
        try:
            numerator, denominator = int(parts[0]), int(parts[1])
        except ValueError as e:
            raise InvalidFractionError(f"Non-integer fraction term in {text!r}") from e
        return cls(numerator, denominator)
