"""
Practice and assessment rounds.

An exercise round presents one exercise at a time: the learner submits an
answer, sees feedback, then advances. Two rounds share that flow:

- AdaptivePractice: a fixed number of exercises generated one by one at the
  adaptive controller's current difficulty.
- MasteryAssessment: a fixed set generated up front, cycling difficulties and
  methods, scored against the mastery threshold.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..agents.exercise_generator import Exercise, ExerciseGenerator
from ..agents.grading_agent import GradingAgent, GradingResult
from ..config import config
from ..utils.progress import percent_correct
from .adaptive_difficulty import AdaptiveDifficultyController
from .progress import ExerciseResponse

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when an operation is not allowed in the current state."""


class ExerciseRound:
    """Shared submit/advance flow for a sequence of exercises."""

    def __init__(
        self,
        total: int,
        generator: Optional[ExerciseGenerator] = None,
        grader: Optional[GradingAgent] = None,
    ):
        self.total = total
        self.generator = generator or ExerciseGenerator()
        self.grader = grader or GradingAgent()

        self.exercises: List[Exercise] = []
        self.responses: List[ExerciseResponse] = []
        self.current_index = 0
        self._presented_at = time.monotonic()

    @property
    def current_exercise(self) -> Exercise:
        return self.exercises[self.current_index]

    @property
    def current_answered(self) -> bool:
        return len(self.responses) > self.current_index

    @property
    def is_finished(self) -> bool:
        """True once the last exercise has been answered."""
        return len(self.responses) >= self.total

    @property
    def correct_count(self) -> int:
        return sum(1 for r in self.responses if r.is_correct)

    @property
    def running_accuracy(self) -> float:
        """Percent correct over answered exercises (0 before any answer)."""
        return percent_correct(self.responses)

    def submit_answer(
        self,
        answer: Optional[str],
        justification: Optional[str],
        time_spent_seconds: Optional[float] = None,
    ) -> GradingResult:
        """
        Grade the learner's answer to the current exercise.

        Args:
            answer: '<', '=' or '>'
            justification: Learner's explanation
            time_spent_seconds: Time spent (measured from presentation if None)

        Raises:
            IncompleteSubmissionError: If answer or justification is missing
            InvalidTransitionError: If the current exercise was already answered
        """
        if self.current_answered:
            raise InvalidTransitionError(
                f"Exercise {self.current_exercise.exercise_id} already answered"
            )
        if time_spent_seconds is None:
            time_spent_seconds = round(time.monotonic() - self._presented_at, 3)

        result = self.grader.grade(self.current_exercise, answer, justification, time_spent_seconds)
        self.responses.append(result.response)
        self._on_graded(result)
        return result

    def advance(self) -> Optional[Exercise]:
        """
        Move to the next exercise.

        Returns:
            The next exercise, or None when the round is finished

        Raises:
            InvalidTransitionError: If the current exercise is unanswered
        """
        if not self.current_answered:
            raise InvalidTransitionError("Answer the current exercise before advancing")
        if self.current_index >= self.total - 1:
            return None

        self.current_index += 1
        self._prepare_next()
        self._presented_at = time.monotonic()
        return self.current_exercise

    def _on_graded(self, result: GradingResult) -> None:
        pass

    def _prepare_next(self) -> None:
        pass


class AdaptivePractice(ExerciseRound):
    """
    Adaptive practice round.

    Each exercise is generated at the controller's current difficulty with a
    randomly chosen method. The controller records every result and, before
    each following exercise, may step the difficulty by one increment.
    """

    def __init__(
        self,
        difficulty: float = 1.0,
        target_accuracy: Optional[float] = None,
        generator: Optional[ExerciseGenerator] = None,
        grader: Optional[GradingAgent] = None,
        num_exercises: Optional[int] = None,
        on_difficulty_change: Optional[Callable[[float], None]] = None,
    ):
        """
        Initialize practice round.

        Args:
            difficulty: Starting difficulty (usually Progress.adaptive_difficulty)
            target_accuracy: Target percent accuracy (default: curriculum target)
            generator: Exercise generator
            grader: Grading agent
            num_exercises: Exercises in the round (default: config)
            on_difficulty_change: Called with the new difficulty whenever it changes
        """
        super().__init__(
            total=num_exercises or config.curriculum.practice_exercise_count,
            generator=generator,
            grader=grader,
        )
        self.controller = AdaptiveDifficultyController(
            difficulty=difficulty, target_accuracy=target_accuracy
        )
        self.on_difficulty_change = on_difficulty_change
        self.exercises.append(self.generator.practice_exercise(self.controller.difficulty))

    @property
    def difficulty(self) -> float:
        return self.controller.difficulty

    @property
    def accuracy(self) -> float:
        """Percent correct over the whole round."""
        return self.running_accuracy

    def _on_graded(self, result: GradingResult) -> None:
        self.controller.record_result(result.is_correct)

    def _prepare_next(self) -> None:
        previous = self.controller.difficulty
        difficulty = self.controller.adjust()
        if difficulty != previous:
            logger.debug("Practice difficulty %.1f -> %.1f", previous, difficulty)
            if self.on_difficulty_change is not None:
                self.on_difficulty_change(difficulty)
        self.exercises.append(self.generator.practice_exercise(difficulty))


@dataclass(frozen=True)
class AssessmentResult:
    """Outcome of a mastery assessment."""
    score: float  # 0-100, rounded to 2 decimals
    passed: bool
    correct_count: int
    total: int


class MasteryAssessment(ExerciseRound):
    """
    Mastery assessment round.

    All exercises are generated up front, independent of adaptive difficulty.
    Score is correct answers over the full set; passing requires the mastery
    threshold.
    """

    def __init__(
        self,
        session_number: int,
        generator: Optional[ExerciseGenerator] = None,
        grader: Optional[GradingAgent] = None,
        num_exercises: Optional[int] = None,
        passing_score: Optional[float] = None,
    ):
        super().__init__(
            total=num_exercises or config.curriculum.assessment_exercise_count,
            generator=generator,
            grader=grader,
        )
        self.session_number = session_number
        self.passing_score = (
            config.curriculum.mastery_threshold if passing_score is None else passing_score
        )
        self.exercises = self.generator.assessment_exercises(session_number, self.total)

    def complete(self) -> AssessmentResult:
        """
        Score the finished assessment.

        Raises:
            InvalidTransitionError: If any exercise is still unanswered
        """
        if not self.is_finished:
            raise InvalidTransitionError(
                f"Assessment incomplete: {len(self.responses)}/{self.total} answered"
            )
        return score_assessment(self.responses, self.total, self.passing_score)


def score_assessment(
    responses: List[ExerciseResponse],
    total: Optional[int] = None,
    passing_score: Optional[float] = None,
) -> AssessmentResult:
    """
    Score a set of assessment responses.

    Example:
        11 of 12 correct -> score 91.67, passed
        10 of 12 correct -> score 83.33, not passed
    """
    total = total or config.curriculum.assessment_exercise_count
    threshold = config.curriculum.mastery_threshold if passing_score is None else passing_score
    correct = sum(1 for r in responses if r.is_correct)
    raw_score = correct / total * 100
    return AssessmentResult(
        score=round(raw_score, 2),
        passed=raw_score >= threshold,
        correct_count=correct,
        total=total,
    )
