"""
Exercise Generator - Creates fraction-comparison exercises keyed by difficulty.

Difficulty maps to a tier of generation constraints: larger denominators and a
smaller minimum gap between the two values make a pair harder to tell apart.
The correct answer of every exercise is computed by the comparator for the
exercise's method, with the benchmark fallback applied.
"""

from __future__ import annotations

import logging
import math
import random
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..config import DifficultyTier, config
from ..models.fraction import (
    COMPARISON_SYMBOLS,
    METHOD_ORDER,
    Comparison,
    ComparisonMethod,
    Fraction,
)
from ..utils.comparator import compare_fractions
from ..utils.fraction_math import simplify, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Exercise:
    """
    A single comparison exercise.

    Attributes:
        exercise_id: Unique identifier
        fraction1: Left-hand fraction
        fraction2: Right-hand fraction
        correct_answer: '<', '=' or '>'
        method: Method the learner is asked to use
        difficulty: Difficulty the pair was generated at (1.0-5.0)
    """
    exercise_id: str
    fraction1: Fraction
    fraction2: Fraction
    correct_answer: Comparison
    method: ComparisonMethod
    difficulty: float

    def validate(self) -> None:
        """
        Validate exercise integrity.

        Raises:
            ValueError: If validation fails
        """
        if self.correct_answer not in COMPARISON_SYMBOLS:
            raise ValueError(
                f"Exercise {self.exercise_id} has invalid correct_answer {self.correct_answer!r}"
            )
        if not (config.adaptive.min_difficulty <= self.difficulty <= config.adaptive.max_difficulty):
            raise ValueError(
                f"Exercise {self.exercise_id} difficulty must be in "
                f"[{config.adaptive.min_difficulty}, {config.adaptive.max_difficulty}], got {self.difficulty}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for persistence or rendering."""
        return {
            "exercise_id": self.exercise_id,
            "fraction1": self.fraction1.to_dict(),
            "fraction2": self.fraction2.to_dict(),
            "correct_answer": self.correct_answer,
            "method": self.method.value,
            "difficulty": self.difficulty,
        }


def difficulty_band(difficulty: float) -> int:
    """
    Round a continuous difficulty half-up to an integer band.

    Example:
        >>> difficulty_band(2.5)
        3
    """
    return int(math.floor(difficulty + 0.5))


def tier_for_difficulty(difficulty: float) -> DifficultyTier:
    """Select generation constraints for a difficulty (<=2, 3, >=4)."""
    band = difficulty_band(difficulty)
    if band <= 2:
        return config.generator.easy_tier
    if band == 3:
        return config.generator.medium_tier
    return config.generator.hard_tier


class ExerciseGenerator:
    """
    Generates fraction pairs and exercises.

    Features:
    - Proper fractions with denominators drawn from the tier range
    - Soft minimum gap between the pair (bounded retries)
    - Random operand order to avoid positional bias
    - Practice exercises with a random method
    - Assessment sets cycling difficulty 2-4 and the three methods
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        simplify_fractions: Optional[bool] = None,
    ):
        """
        Initialize generator.

        Args:
            seed: Seed for reproducible exercises (default: config.generator.random_seed)
            rng: Pre-built random source (takes precedence over seed)
            simplify_fractions: Reduce generated fractions to lowest terms
        """
        if rng is None:
            rng = random.Random(seed if seed is not None else config.generator.random_seed)
        self.rng = rng
        self.simplify_fractions = (
            config.generator.simplify if simplify_fractions is None else simplify_fractions
        )

    def generate_fraction(self, min_denominator: int = 2, max_denominator: int = 12) -> Fraction:
        """
        Generate a proper fraction.

        Denominator is uniform in [min_denominator, max_denominator], numerator
        uniform in [1, denominator - 1].
        """
        if min_denominator < 2:
            raise ValueError(f"min_denominator must be >= 2, got {min_denominator}")
        denominator = self.rng.randint(min_denominator, max_denominator)
        numerator = self.rng.randint(1, denominator - 1)
        fraction = Fraction(numerator, denominator)
        return simplify(fraction) if self.simplify_fractions else fraction

    def generate_pair(self, difficulty: float) -> tuple[Fraction, Fraction]:
        """
        Generate a pair of fractions for the given difficulty.

        The second fraction is redrawn until the decimal gap reaches the tier's
        minimum or the attempt cap is hit; the last candidate is kept either way.
        """
        tier = tier_for_difficulty(difficulty)

        fraction1 = self.generate_fraction(tier.min_denominator, tier.max_denominator)
        value1 = to_decimal(fraction1)

        attempts = 0
        while True:
            fraction2 = self.generate_fraction(tier.min_denominator, tier.max_denominator)
            attempts += 1
            gap = abs(value1 - to_decimal(fraction2))
            if gap >= tier.minimum_gap or attempts >= config.generator.max_attempts:
                break

        if self.rng.random() < config.generator.swap_probability:
            return fraction2, fraction1
        return fraction1, fraction2

    def create_exercise(
        self,
        difficulty: float,
        method: ComparisonMethod,
        exercise_id: Optional[str] = None,
    ) -> Exercise:
        """Generate a pair and compute its correct answer for the given method."""
        fraction1, fraction2 = self.generate_pair(difficulty)
        exercise = Exercise(
            exercise_id=exercise_id or f"ex-{uuid.uuid4()}",
            fraction1=fraction1,
            fraction2=fraction2,
            correct_answer=compare_fractions(fraction1, fraction2, method),
            method=ComparisonMethod(method),
            difficulty=difficulty,
        )
        exercise.validate()
        logger.debug(
            "Generated %s: %s %s %s (%s, difficulty %.1f)",
            exercise.exercise_id,
            fraction1,
            exercise.correct_answer,
            fraction2,
            exercise.method.value,
            difficulty,
        )
        return exercise

    def practice_exercise(self, difficulty: float) -> Exercise:
        """Create a practice exercise with a randomly chosen method."""
        method = self.rng.choice(METHOD_ORDER)
        return self.create_exercise(difficulty, method)

    def assessment_exercises(
        self,
        session_number: int,
        count: Optional[int] = None,
    ) -> List[Exercise]:
        """
        Create the fixed assessment set for a session.

        Exercise i uses difficulty 2 + (i % 3) and method i % 3, independent of
        the learner's adaptive difficulty.
        """
        count = count or config.curriculum.assessment_exercise_count
        base = config.curriculum.assessment_base_difficulty
        span = config.curriculum.assessment_difficulty_span

        return [
            self.create_exercise(
                difficulty=float(base + (i % span)),
                method=METHOD_ORDER[i % len(METHOD_ORDER)],
                exercise_id=f"quiz-{session_number}-{i}",
            )
            for i in range(count)
        ]
