"""
Grading Agent - Scores comparison answers and classifies mistakes.

Submissions are validated before scoring: an answer symbol and a non-blank
justification are both required. Incorrect answers are classified so the
error log can distinguish reversed comparisons from equivalence mistakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models.fraction import COMPARISON_SYMBOLS, Comparison
from ..models.progress import ExerciseResponse
from ..utils.fraction_math import format_fraction, to_decimal
from .exercise_generator import Exercise


ERROR_REVERSED = "reversed-comparison"
ERROR_MISSED_EQUIVALENCE = "missed-equivalence"
ERROR_FALSE_EQUIVALENCE = "false-equivalence"


class IncompleteSubmissionError(ValueError):
    """Raised when an answer or justification is missing; nothing is scored."""


@dataclass
class GradingResult:
    """
    Result of grading one submission.

    Attributes:
        response: The immutable ExerciseResponse to append to the session
        feedback: Learner-facing feedback line
        correct_statement: The true relation, e.g. '3/4 < 5/6'
        decimal_values: Decimal values of both fractions (optional reveal)
    """
    response: ExerciseResponse
    feedback: str
    correct_statement: str
    decimal_values: tuple[float, float]

    @property
    def is_correct(self) -> bool:
        return self.response.is_correct

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "response": self.response.to_dict(),
            "feedback": self.feedback,
            "correct_statement": self.correct_statement,
            "decimal_values": list(self.decimal_values),
        }


def validate_submission(answer: Optional[str], justification: Optional[str]) -> Comparison:
    """
    Check that a submission is complete.

    Returns:
        The normalized answer symbol

    Raises:
        IncompleteSubmissionError: If answer is missing/unknown or justification is blank
    """
    if not answer or answer.strip() not in COMPARISON_SYMBOLS:
        raise IncompleteSubmissionError(
            f"Answer must be one of {', '.join(COMPARISON_SYMBOLS)}, got {answer!r}"
        )
    if not justification or not justification.strip():
        raise IncompleteSubmissionError("Justification cannot be empty")
    return answer.strip()


def classify_error(answer: Comparison, correct_answer: Comparison) -> Optional[str]:
    """Classify a wrong answer; None when the answer is correct."""
    if answer == correct_answer:
        return None
    if answer == "=":
        return ERROR_FALSE_EQUIVALENCE
    if correct_answer == "=":
        return ERROR_MISSED_EQUIVALENCE
    return ERROR_REVERSED


class GradingAgent:
    """Deterministic grader for fraction-comparison exercises."""

    def grade(
        self,
        exercise: Exercise,
        answer: Optional[str],
        justification: Optional[str],
        time_spent_seconds: float = 0.0,
    ) -> GradingResult:
        """
        Grade a submission against the exercise's correct answer.

        Raises:
            IncompleteSubmissionError: If the submission is incomplete
            ValueError: If time_spent_seconds is negative
        """
        symbol = validate_submission(answer, justification)
        if time_spent_seconds < 0:
            raise ValueError(f"Time spent cannot be negative: {time_spent_seconds}")

        is_correct = symbol == exercise.correct_answer
        response = ExerciseResponse(
            exercise_id=exercise.exercise_id,
            answer=symbol,
            justification=justification.strip(),
            is_correct=is_correct,
            time_spent_seconds=time_spent_seconds,
            error_type=classify_error(symbol, exercise.correct_answer),
        )

        correct_statement = (
            f"{format_fraction(exercise.fraction1)} {exercise.correct_answer} "
            f"{format_fraction(exercise.fraction2)}"
        )
        if is_correct:
            feedback = f"Correct! {correct_statement}"
        else:
            feedback = f"Incorrect. The correct answer is: {correct_statement}"

        return GradingResult(
            response=response,
            feedback=feedback,
            correct_statement=correct_statement,
            decimal_values=(to_decimal(exercise.fraction1), to_decimal(exercise.fraction2)),
        )
