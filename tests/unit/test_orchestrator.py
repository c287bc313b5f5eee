"""
Unit tests for the session orchestrator (session state machine).

Tests instruction stepping, practice → assessment hand-off, pass and retry
branches, progress persistence and resumption.
"""

import pytest

from fractionlab.agents.grading_agent import IncompleteSubmissionError
from fractionlab.models.progress import Progress
from fractionlab.orchestrator import (
    AssessmentState,
    CompleteState,
    InstructionState,
    InvalidTransitionError,
    PracticeState,
    RetryState,
    SessionOrchestrator,
    SessionPhase,
    next_session_number,
    session_statuses,
)


# ==================== Helpers ====================

def finish_instruction(orchestrator):
    for _ in range(3):
        orchestrator.next_step()
        orchestrator.next_step()
        orchestrator.complete_method()


def answer_current(orchestrator, correct=True):
    truth = orchestrator.current_exercise.correct_answer
    symbol = truth if correct else next(s for s in "<=>" if s != truth)
    return orchestrator.submit_answer(symbol, "compared both to one half", 20.0)


def finish_round(orchestrator, wrong_indices=()):
    """Answer every exercise of the current round; indices in wrong_indices are answered wrong."""
    state_type = type(orchestrator.state)
    index = 0
    while isinstance(orchestrator.state, state_type):
        answer_current(orchestrator, correct=index not in wrong_indices)
        orchestrator.next_exercise()
        index += 1


def run_session(orchestrator, assessment_wrong=()):
    finish_instruction(orchestrator)
    finish_round(orchestrator)
    finish_round(orchestrator, assessment_wrong)


def seed_progress(repository, completed):
    progress = Progress.initial()
    for number in completed:
        progress = progress.with_completed_session(number)
    return repository.save_progress(progress)


# ==================== Navigation ====================

class TestNavigation:
    def test_next_session_number(self):
        assert next_session_number(1) == 2
        assert next_session_number(4) == 5
        assert next_session_number(5) is None

    def test_session_statuses(self):
        progress = Progress.initial().with_completed_session(1).with_completed_session(2)
        assert session_statuses(progress) == {
            1: "completed",
            2: "completed",
            3: "current",
            4: "locked",
            5: "locked",
        }

    def test_available_when_below_current_but_not_completed(self):
        progress = Progress(current_session=3, completed_sessions=(2,))
        assert session_statuses(progress)[1] == "available"


# ==================== Start ====================

class TestStart:
    def test_first_access_creates_default_progress(self, repository, generator):
        assert repository.get_progress() is None
        SessionOrchestrator(1, repository, generator=generator)
        progress = repository.get_progress()
        assert progress.current_session == 1
        assert progress.completed_sessions == ()
        assert progress.adaptive_difficulty == 1.0
        assert progress.last_practice_accuracy == 0.0

    def test_locked_session_cannot_start(self, repository, generator):
        with pytest.raises(InvalidTransitionError):
            SessionOrchestrator(3, repository, generator=generator)

    def test_out_of_range_session(self, repository):
        with pytest.raises(ValueError):
            SessionOrchestrator(6, repository)

    def test_starts_in_instruction(self, repository, generator):
        orchestrator = SessionOrchestrator(1, repository, generator=generator)
        assert orchestrator.phase is SessionPhase.INSTRUCTION
        assert orchestrator.state == InstructionState(0, 0)
        assert orchestrator.lesson.method.value == "benchmark"


# ==================== Instruction ====================

class TestInstruction:
    @pytest.fixture
    def orchestrator(self, repository, generator):
        return SessionOrchestrator(1, repository, generator=generator)

    def test_step_forward_and_back(self, orchestrator):
        orchestrator.next_step()
        assert orchestrator.state.step == 1
        assert orchestrator.instruction_step.title == "Worked example"
        orchestrator.previous_step()
        assert orchestrator.state.step == 0

    def test_cannot_go_before_first_step(self, orchestrator):
        with pytest.raises(InvalidTransitionError):
            orchestrator.previous_step()

    def test_cannot_pass_last_step(self, orchestrator):
        orchestrator.next_step()
        orchestrator.next_step()
        with pytest.raises(InvalidTransitionError):
            orchestrator.next_step()

    def test_method_requires_last_step(self, orchestrator):
        orchestrator.next_step()
        with pytest.raises(InvalidTransitionError):
            orchestrator.complete_method()

    def test_methods_in_order(self, orchestrator):
        seen = []
        for _ in range(3):
            seen.append(orchestrator.state.method.value)
            orchestrator.next_step()
            orchestrator.next_step()
            orchestrator.complete_method()
        assert seen == ["benchmark", "common-denominator", "cross-multiplication"]
        assert isinstance(orchestrator.state, PracticeState)

    def test_no_answers_during_instruction(self, orchestrator):
        with pytest.raises(InvalidTransitionError):
            orchestrator.submit_answer("<", "because")


# ==================== Practice ====================

class TestPractice:
    @pytest.fixture
    def orchestrator(self, repository, generator):
        orchestrator = SessionOrchestrator(1, repository, generator=generator)
        finish_instruction(orchestrator)
        return orchestrator

    def test_practice_starts_at_stored_difficulty(self, repository, generator):
        repository.save_progress(Progress.initial().with_difficulty(2.5))
        orchestrator = SessionOrchestrator(1, repository, generator=generator)
        finish_instruction(orchestrator)
        assert orchestrator.state.practice.difficulty == 2.5
        assert orchestrator.current_exercise.difficulty == 2.5

    def test_incorrect_answer_logged_with_session_number(self, orchestrator, repository):
        result = answer_current(orchestrator, correct=False)
        logs = repository.get_error_logs()
        assert len(logs) == 1
        assert logs[0].session_number == 1
        assert logs[0].exercise_id == result.response.exercise_id
        assert logs[0].error_type == result.response.error_type

    def test_correct_answer_not_logged(self, orchestrator, repository):
        answer_current(orchestrator)
        assert repository.get_error_logs() == []

    def test_incomplete_submission_not_logged(self, orchestrator, repository):
        with pytest.raises(IncompleteSubmissionError):
            orchestrator.submit_answer(None, "because")
        assert repository.get_error_logs() == []
        assert orchestrator.current_round.current_index == 0

    def test_difficulty_changes_persisted_immediately(self, orchestrator, repository):
        for _ in range(3):
            answer_current(orchestrator)
            orchestrator.next_exercise()
        assert repository.get_progress().adaptive_difficulty == 1.5

    def test_completion_persists_accuracy_and_starts_assessment(self, orchestrator, repository):
        finish_round(orchestrator, wrong_indices={9})
        progress = repository.get_progress()
        assert progress.last_practice_accuracy == 90.0
        assert progress.adaptive_difficulty == 4.5
        assert isinstance(orchestrator.state, AssessmentState)
        assert len(orchestrator.session.exercises) == 10
        assert orchestrator.current_exercise.exercise_id == "quiz-1-0"


# ==================== Assessment outcomes ====================

class TestAssessmentOutcome:
    def test_pass_session_three_updates_progress(self, repository, generator):
        seed_progress(repository, [1, 2])
        orchestrator = SessionOrchestrator(3, repository, generator=generator)
        run_session(orchestrator, assessment_wrong={4})

        assert isinstance(orchestrator.state, CompleteState)
        assert orchestrator.state.result.score == 91.67
        assert not orchestrator.state.is_final_session

        progress = repository.get_progress()
        assert progress.completed_sessions == (1, 2, 3)
        assert progress.current_session == 4

        sessions = repository.get_sessions()
        assert len(sessions) == 1
        assert sessions[0].completed
        assert sessions[0].quiz_score == 91.67
        assert sessions[0].quiz_passed is True
        assert sessions[0].end_time is not None
        assert len(sessions[0].exercises) == 22

    def test_fail_routes_to_retry_without_progress_change(self, repository, generator):
        orchestrator = SessionOrchestrator(1, repository, generator=generator)
        run_session(orchestrator, assessment_wrong={0, 1})

        assert isinstance(orchestrator.state, RetryState)
        assert orchestrator.state.result.score == 83.33
        assert not orchestrator.state.result.passed

        progress = repository.get_progress()
        assert progress.completed_sessions == ()
        assert progress.current_session == 1

        sessions = repository.get_sessions()
        assert len(sessions) == 1
        assert sessions[0].completed
        assert sessions[0].quiz_passed is False

    def test_retry_starts_fresh_attempt(self, repository, generator):
        orchestrator = SessionOrchestrator(1, repository, generator=generator)
        run_session(orchestrator, assessment_wrong={0, 1, 2})
        failed_id = orchestrator.session.session_id

        orchestrator.retry()
        assert orchestrator.state == InstructionState(0, 0)
        assert orchestrator.session.session_id != failed_id
        assert orchestrator.session.attempt == 2
        assert orchestrator.session.exercises == []

        run_session(orchestrator)
        assert isinstance(orchestrator.state, CompleteState)
        sessions = repository.get_sessions()
        assert [s.quiz_passed for s in sessions] == [False, True]
        assert repository.get_progress().completed_sessions == (1,)

    def test_retry_only_after_failure(self, repository, generator):
        orchestrator = SessionOrchestrator(1, repository, generator=generator)
        with pytest.raises(InvalidTransitionError):
            orchestrator.retry()

    def test_final_session(self, repository, generator):
        seed_progress(repository, [1, 2, 3, 4])
        orchestrator = SessionOrchestrator(5, repository, generator=generator)
        run_session(orchestrator)

        assert orchestrator.state.is_final_session
        assert orchestrator.next_session_number is None
        progress = repository.get_progress()
        assert progress.current_session == 6
        assert progress.curriculum_complete

    def test_repeating_completed_session_keeps_progress_sorted(self, repository, generator):
        seed_progress(repository, [1, 2, 3])
        orchestrator = SessionOrchestrator(2, repository, generator=generator)
        run_session(orchestrator)
        progress = repository.get_progress()
        assert progress.completed_sessions == (1, 2, 3)
        assert progress.current_session == 4


# ==================== Resumption ====================

class TestResume:
    def test_abandoned_session_resumes_from_stored_progress(self, repository, generator):
        first = SessionOrchestrator(1, repository, generator=generator)
        finish_instruction(first)
        for _ in range(5):
            answer_current(first)
            first.next_exercise()
        # Abandoned mid-practice; nothing but difficulty changes were stored
        assert repository.get_sessions() == []
        stored_difficulty = repository.get_progress().adaptive_difficulty
        assert stored_difficulty > 1.0

        second = SessionOrchestrator(1, repository, generator=generator)
        assert second.phase is SessionPhase.INSTRUCTION
        finish_instruction(second)
        assert second.state.practice.difficulty == stored_difficulty
