"""
Unit tests for the grading agent.

Tests submission validation, scoring, feedback and error classification.
"""

import pytest

from fractionlab.agents.exercise_generator import Exercise
from fractionlab.agents.grading_agent import (
    ERROR_FALSE_EQUIVALENCE,
    ERROR_MISSED_EQUIVALENCE,
    ERROR_REVERSED,
    GradingAgent,
    IncompleteSubmissionError,
    classify_error,
    validate_submission,
)
from fractionlab.models.fraction import ComparisonMethod, Fraction


@pytest.fixture
def exercise():
    return Exercise(
        exercise_id="ex-test",
        fraction1=Fraction(3, 4),
        fraction2=Fraction(5, 6),
        correct_answer="<",
        method=ComparisonMethod.COMMON_DENOMINATOR,
        difficulty=2.0,
    )


@pytest.fixture
def grader():
    return GradingAgent()


class TestValidateSubmission:
    """Incomplete submissions are rejected before scoring."""

    @pytest.mark.parametrize("answer", [None, "", "  ", "≤", "less"])
    def test_missing_or_unknown_answer(self, answer):
        with pytest.raises(IncompleteSubmissionError):
            validate_submission(answer, "because")

    @pytest.mark.parametrize("justification", [None, "", "   \n"])
    def test_blank_justification(self, justification):
        with pytest.raises(IncompleteSubmissionError):
            validate_submission("<", justification)

    def test_answer_is_stripped(self):
        assert validate_submission(" > ", "bigger pieces") == ">"

    def test_incomplete_submission_is_value_error(self):
        assert issubclass(IncompleteSubmissionError, ValueError)


class TestClassifyError:
    def test_correct_answer_has_no_error(self):
        assert classify_error("<", "<") is None

    def test_reversed(self):
        assert classify_error(">", "<") == ERROR_REVERSED

    def test_missed_equivalence(self):
        assert classify_error("<", "=") == ERROR_MISSED_EQUIVALENCE

    def test_false_equivalence(self):
        assert classify_error("=", ">") == ERROR_FALSE_EQUIVALENCE


class TestGradingAgent:
    def test_correct_answer(self, grader, exercise):
        result = grader.grade(exercise, "<", "9/12 is less than 10/12", 14.0)
        assert result.is_correct
        assert result.feedback == "Correct! 3/4 < 5/6"
        assert result.response.error_type is None
        assert result.response.time_spent_seconds == 14.0
        assert result.response.exercise_id == "ex-test"

    def test_incorrect_answer(self, grader, exercise):
        result = grader.grade(exercise, ">", "3 is bigger than... no")
        assert not result.is_correct
        assert result.feedback == "Incorrect. The correct answer is: 3/4 < 5/6"
        assert result.response.error_type == ERROR_REVERSED

    def test_decimal_values_reveal(self, grader, exercise):
        result = grader.grade(exercise, "<", "closer to one")
        assert result.decimal_values == pytest.approx((0.75, 0.8333333))

    def test_justification_is_stripped(self, grader, exercise):
        result = grader.grade(exercise, "<", "  LCM is 12  ")
        assert result.response.justification == "LCM is 12"

    def test_negative_time_rejected(self, grader, exercise):
        with pytest.raises(ValueError):
            grader.grade(exercise, "<", "because", -1.0)

    def test_incomplete_submission_not_graded(self, grader, exercise):
        with pytest.raises(IncompleteSubmissionError):
            grader.grade(exercise, "<", "")

    def test_to_dict(self, grader, exercise):
        data = grader.grade(exercise, "=", "same size").to_dict()
        assert data["response"]["error_type"] == ERROR_FALSE_EQUIVALENCE
        assert data["correct_statement"] == "3/4 < 5/6"
        assert len(data["decimal_values"]) == 2
