"""
Session Orchestrator

Sequences one attempt at a numbered session:
1. Instruction (three comparison methods, stepped through in order)
2. Adaptive practice
3. Mastery assessment
4. Complete (passed) or Retry (failed, back to instruction with a new attempt)

Progress is re-read from the repository at every phase boundary and written
back wholesale, so a session abandoned mid-phase can be resumed by building a
new orchestrator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from .agents.exercise_generator import Exercise, ExerciseGenerator
from .agents.grading_agent import GradingAgent, GradingResult
from .agents.instructor import Instructor, InstructionStep, Lesson
from .config import config
from .models.fraction import METHOD_ORDER, ComparisonMethod
from .models.practice_session import (
    AdaptivePractice,
    AssessmentResult,
    ExerciseRound,
    InvalidTransitionError,
    MasteryAssessment,
)
from .models.progress import ErrorLog, Progress, Session, SessionStatus
from .utils.persistence import CurriculumRepository, get_repository

logger = logging.getLogger(__name__)


# ==================== Session States ====================

class SessionPhase(str, Enum):
    INSTRUCTION = "instruction"
    PRACTICE = "practice"
    ASSESSMENT = "assessment"
    COMPLETE = "complete"
    RETRY = "retry"


@dataclass(frozen=True)
class InstructionState:
    """Position within the instruction phase."""
    method_index: int = 0
    step: int = 0

    phase = SessionPhase.INSTRUCTION

    @property
    def method(self) -> ComparisonMethod:
        return METHOD_ORDER[self.method_index]


@dataclass(frozen=True)
class PracticeState:
    practice: AdaptivePractice

    phase = SessionPhase.PRACTICE


@dataclass(frozen=True)
class AssessmentState:
    assessment: MasteryAssessment

    phase = SessionPhase.ASSESSMENT


@dataclass(frozen=True)
class CompleteState:
    """Assessment passed; terminal for this orchestrator."""
    result: AssessmentResult
    is_final_session: bool

    phase = SessionPhase.COMPLETE


@dataclass(frozen=True)
class RetryState:
    """Assessment failed; call retry() to start a new attempt."""
    result: AssessmentResult

    phase = SessionPhase.RETRY


SessionState = Union[InstructionState, PracticeState, AssessmentState, CompleteState, RetryState]


# ==================== Curriculum navigation ====================

def session_statuses(progress: Progress) -> Dict[int, SessionStatus]:
    """Status of every session card for the curriculum overview."""
    return {
        number: progress.session_status(number)
        for number in range(1, config.curriculum.session_count + 1)
    }


def next_session_number(session_number: int) -> Optional[int]:
    """The session after this one, or None after the final session."""
    if session_number >= config.curriculum.session_count:
        return None
    return session_number + 1


# ==================== Orchestrator ====================

class SessionOrchestrator:
    """
    State machine for one numbered session.

    Usage:
        orchestrator = SessionOrchestrator(1, repository)
        while orchestrator.phase is SessionPhase.INSTRUCTION:
            ...  # next_step() / complete_method()
        orchestrator.submit_answer("<", "3/4 is closer to 1")
        orchestrator.next_exercise()
    """

    def __init__(
        self,
        session_number: int,
        repository: Optional[CurriculumRepository] = None,
        generator: Optional[ExerciseGenerator] = None,
        grader: Optional[GradingAgent] = None,
        instructor: Optional[Instructor] = None,
        target_accuracy: Optional[float] = None,
    ):
        """
        Start an attempt at a session.

        Args:
            session_number: Session to run (1 to session_count)
            repository: Curriculum repository (default: global repository)
            generator: Exercise generator shared by practice and assessment
            grader: Grading agent
            instructor: Lesson provider
            target_accuracy: Practice target accuracy (default: config)

        Raises:
            ValueError: If session_number is out of range
            InvalidTransitionError: If the session is still locked
        """
        self.repository = repository or get_repository()
        self.generator = generator or ExerciseGenerator()
        self.grader = grader or GradingAgent()
        self.instructor = instructor or Instructor()
        self.target_accuracy = (
            config.curriculum.target_accuracy if target_accuracy is None else target_accuracy
        )

        self.session = Session(session_number=session_number)
        progress = self._load_progress()
        if not progress.is_unlocked(session_number):
            raise InvalidTransitionError(
                f"Session {session_number} is locked (current session is {progress.current_session})"
            )

        self.state: SessionState = InstructionState()
        logger.info("Started session %d (%s)", session_number, self.session.session_id)

    # ==================== State accessors ====================

    @property
    def session_number(self) -> int:
        return self.session.session_number

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def progress(self) -> Progress:
        """Freshly read progress."""
        return self._load_progress()

    @property
    def lesson(self) -> Lesson:
        state = self._require(InstructionState)
        return self.instructor.lesson_for(state.method)

    @property
    def instruction_step(self) -> InstructionStep:
        state = self._require(InstructionState)
        return self.lesson.steps[state.step]

    @property
    def current_round(self) -> ExerciseRound:
        if isinstance(self.state, PracticeState):
            return self.state.practice
        if isinstance(self.state, AssessmentState):
            return self.state.assessment
        raise InvalidTransitionError(f"No exercises during {self.phase.value}")

    @property
    def current_exercise(self) -> Exercise:
        return self.current_round.current_exercise

    # ==================== Instruction ====================

    def next_step(self) -> InstructionState:
        """
        Move to the next step of the current method's lesson.

        Raises:
            InvalidTransitionError: Outside instruction or at the last step
        """
        state = self._require(InstructionState)
        if state.step >= self.lesson.last_step:
            raise InvalidTransitionError("Already at the last step; complete the method instead")
        self.state = InstructionState(state.method_index, state.step + 1)
        return self.state

    def previous_step(self) -> InstructionState:
        state = self._require(InstructionState)
        if state.step == 0:
            raise InvalidTransitionError("Already at the first step")
        self.state = InstructionState(state.method_index, state.step - 1)
        return self.state

    def complete_method(self) -> SessionState:
        """
        Finish the current method's lesson.

        Moves to the next method, or to practice after the last method.

        Raises:
            InvalidTransitionError: Outside instruction or before the last step
        """
        state = self._require(InstructionState)
        if state.step < self.lesson.last_step:
            raise InvalidTransitionError(
                f"Step through the {state.method.label} lesson before completing it"
            )

        if state.method_index < len(METHOD_ORDER) - 1:
            self.state = InstructionState(state.method_index + 1, 0)
            return self.state

        progress = self._load_progress()
        practice = AdaptivePractice(
            difficulty=progress.adaptive_difficulty,
            target_accuracy=self.target_accuracy,
            generator=self.generator,
            grader=self.grader,
            on_difficulty_change=self._persist_difficulty,
        )
        self.state = PracticeState(practice)
        logger.info(
            "Session %d: instruction complete, practice at difficulty %.1f",
            self.session_number,
            practice.difficulty,
        )
        return self.state

    # ==================== Practice and assessment ====================

    def submit_answer(
        self,
        answer: Optional[str],
        justification: Optional[str],
        time_spent_seconds: Optional[float] = None,
    ) -> GradingResult:
        """
        Grade an answer to the current practice or assessment exercise.

        Incorrect answers are appended to the error log.

        Raises:
            IncompleteSubmissionError: If answer or justification is missing
            InvalidTransitionError: Outside practice/assessment, or already answered
        """
        exercise_round = self.current_round
        result = exercise_round.submit_answer(answer, justification, time_spent_seconds)
        if not result.is_correct:
            self.repository.append_error_log(
                ErrorLog(
                    session_number=self.session_number,
                    exercise_id=result.response.exercise_id,
                    error_type=result.response.error_type,
                )
            )
        return result

    def next_exercise(self) -> Optional[Exercise]:
        """
        Advance past the answered exercise.

        Returns:
            The next exercise, or None when the round finished (the state has
            then moved on to assessment, complete or retry)

        Raises:
            InvalidTransitionError: If the current exercise is unanswered
        """
        exercise_round = self.current_round
        exercise = exercise_round.advance()
        if exercise is not None:
            return exercise

        if isinstance(self.state, PracticeState):
            self._on_practice_complete(self.state.practice)
        else:
            self._on_assessment_complete(self.state.assessment)
        return None

    def retry(self) -> InstructionState:
        """
        Start a new attempt after a failed assessment.

        The new attempt has a fresh id and no exercise history, and begins at
        the first method's first step.

        Raises:
            InvalidTransitionError: Unless the last assessment failed
        """
        self._require(RetryState)
        previous = self.session
        self.session = Session(session_number=previous.session_number, attempt=previous.attempt + 1)
        self.state = InstructionState()
        logger.info(
            "Session %d: retry, attempt %d (%s)",
            self.session_number,
            self.session.attempt,
            self.session.session_id,
        )
        return self.state

    @property
    def next_session_number(self) -> Optional[int]:
        return next_session_number(self.session_number)

    # ==================== Transitions ====================

    def _on_practice_complete(self, practice: AdaptivePractice) -> None:
        progress = self._load_progress().with_practice_result(
            accuracy=round(practice.accuracy, 2), difficulty=practice.difficulty
        )
        self.repository.save_progress(progress)
        self.session.add_responses(practice.responses)

        self.state = AssessmentState(
            MasteryAssessment(self.session_number, generator=self.generator, grader=self.grader)
        )
        logger.info(
            "Session %d: practice complete (accuracy %.1f%%, difficulty %.1f), assessment started",
            self.session_number,
            practice.accuracy,
            practice.difficulty,
        )

    def _on_assessment_complete(self, assessment: MasteryAssessment) -> None:
        result = assessment.complete()
        self.session.add_responses(assessment.responses)
        self.session.finalize(result.score, result.passed)
        self.repository.save_session(self.session)

        if result.passed:
            progress = self._load_progress().with_completed_session(self.session_number)
            self.repository.save_progress(progress)
            self.state = CompleteState(
                result=result,
                is_final_session=self.session_number == config.curriculum.session_count,
            )
            logger.info(
                "Session %d passed with %.2f%%; current session now %d",
                self.session_number,
                result.score,
                progress.current_session,
            )
        else:
            self.state = RetryState(result=result)
            logger.info(
                "Session %d not passed (%.2f%% < %.0f%%), retry required",
                self.session_number,
                result.score,
                assessment.passing_score,
            )

    def _persist_difficulty(self, difficulty: float) -> None:
        self.repository.save_progress(self._load_progress().with_difficulty(difficulty))

    def _load_progress(self) -> Progress:
        progress = self.repository.get_progress()
        if progress is None:
            progress = self.repository.save_progress(Progress.initial())
        return progress

    def _require(self, state_type: type) -> SessionState:
        if not isinstance(self.state, state_type):
            raise InvalidTransitionError(
                f"Not allowed during {self.phase.value} (expected {state_type.phase.value})"
            )
        return self.state


__all__ = [
    "SessionPhase",
    "InstructionState",
    "PracticeState",
    "AssessmentState",
    "CompleteState",
    "RetryState",
    "SessionState",
    "SessionOrchestrator",
    "InvalidTransitionError",
    "session_statuses",
    "next_session_number",
]
