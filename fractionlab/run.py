"""
FractionLab: text-mode curriculum runner

Walks a learner through the five comparison sessions (instruction, adaptive
practice, mastery assessment) and prints the progress dashboard.

Usage:
    python -m fractionlab.run            # continue where you left off
    python -m fractionlab.run --reset    # clear stored progress first
    python -m fractionlab.run --metrics  # only print the dashboard
"""

import argparse
import sys
from typing import Optional

from .agents.grading_agent import IncompleteSubmissionError
from .config import config, configure_logging
from .evaluation.metrics import MetricsAggregator
from .orchestrator import (
    AssessmentState,
    CompleteState,
    InstructionState,
    PracticeState,
    RetryState,
    SessionOrchestrator,
    session_statuses,
)
from .utils.persistence import CurriculumRepository, JsonFileStore

STATUS_ICONS = {"completed": "✅", "current": "▶️", "available": "○", "locked": "🔒"}


# ==================== Display Helpers ====================

def _print_header(title: str) -> None:
    print()
    print("=" * 60)
    print(title)
    print("=" * 60)


def _print_overview(repository: CurriculumRepository) -> None:
    progress = repository.get_or_initialize_progress()
    _print_header("📚 Comparing Fractions: Session Overview")
    for number, status in session_statuses(progress).items():
        print(f"  {STATUS_ICONS[status]} Session {number}: {status}")
    print(f"\n  Adaptive difficulty: {progress.adaptive_difficulty:.1f}")
    print(f"  Last practice accuracy: {progress.last_practice_accuracy:.1f}%")


def _print_metrics(repository: CurriculumRepository) -> None:
    metrics = MetricsAggregator(repository).compute()
    statuses = metrics.statuses()
    _print_header("📊 Progress Dashboard")
    print(f"  Mastery rate:          {metrics.mastery_rate:6.2f}%  [{statuses['mastery_rate']}]")
    print(f"  Error reduction:       {metrics.error_reduction:6.2f}%  [{statuses['error_reduction']}]")
    print(
        f"  Engagement efficiency: {metrics.engagement_efficiency:6.2f}%  "
        f"[{statuses['engagement_efficiency']}]"
    )
    if metrics.error_rates_by_session:
        print("\n  Error rate by session:")
        for number, rate in metrics.error_rates_by_session.items():
            print(f"    Session {number}: {rate:.1f}%")
    if metrics.error_type_counts:
        print("\n  Mistakes by type:")
        for error_type, count in sorted(metrics.error_type_counts.items()):
            print(f"    {error_type}: {count}")


def _ask(prompt: str) -> str:
    try:
        return input(prompt).strip()
    except EOFError:
        print()
        sys.exit(0)


# ==================== Phases ====================

def _run_instruction(orchestrator: SessionOrchestrator) -> None:
    while isinstance(orchestrator.state, InstructionState):
        state = orchestrator.state
        lesson = orchestrator.lesson
        step = orchestrator.instruction_step
        _print_header(
            f"Method {state.method_index + 1}/3: {lesson.method.label} "
            f"(step {state.step + 1}/{len(lesson.steps)})"
        )
        print(f"{step.title}\n")
        for line in step.lines:
            print(f"  {line}")

        choice = _ask("\n[Enter] next, [b] back: ").lower()
        if choice == "b" and state.step > 0:
            orchestrator.previous_step()
        elif state.step < lesson.last_step:
            orchestrator.next_step()
        else:
            orchestrator.complete_method()


def _run_exercises(orchestrator: SessionOrchestrator) -> None:
    while isinstance(orchestrator.state, (PracticeState, AssessmentState)):
        exercise_round = orchestrator.current_round
        exercise = orchestrator.current_exercise
        title = "Practice" if isinstance(orchestrator.state, PracticeState) else "Assessment"
        print(
            f"\n{title} {exercise_round.current_index + 1}/{exercise_round.total} "
            f"({exercise.method.label}, difficulty {exercise.difficulty:.1f})"
        )
        print(f"  Compare: {exercise.fraction1}  ?  {exercise.fraction2}")

        try:
            result = orchestrator.submit_answer(
                _ask("  Your answer (<, =, >): "),
                _ask("  Explain your reasoning: "),
            )
        except IncompleteSubmissionError as e:
            print(f"  ⚠️  {e}")
            continue

        print(f"  {'✅' if result.is_correct else '❌'} {result.feedback}")
        d1, d2 = result.decimal_values
        print(f"  ({exercise.fraction1} = {d1:.3f}, {exercise.fraction2} = {d2:.3f})")
        print(f"  Running score: {exercise_round.running_accuracy:.1f}%")
        orchestrator.next_exercise()


def run_session(orchestrator: SessionOrchestrator) -> bool:
    """
    Run one session until it is passed or the learner stops retrying.

    Returns:
        True if the session was passed
    """
    while True:
        _run_instruction(orchestrator)
        _run_exercises(orchestrator)

        state = orchestrator.state
        if isinstance(state, CompleteState):
            _print_header(f"🎉 Session {orchestrator.session_number} passed: {state.result.score:.2f}%")
            return True
        if isinstance(state, RetryState):
            _print_header(
                f"Session {orchestrator.session_number}: {state.result.score:.2f}% "
                f"(need {config.curriculum.mastery_threshold:.0f}%)"
            )
            if _ask("Review the lessons and try again? [Y/n]: ").lower() == "n":
                return False
            orchestrator.retry()


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="FractionLab comparing-fractions curriculum")
    parser.add_argument("--reset", action="store_true", help="clear all stored progress first")
    parser.add_argument("--metrics", action="store_true", help="print the dashboard and exit")
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    errors = config.validate()
    if errors:
        for error in errors:
            print(f"❌ Configuration error: {error}")
        return 1
    config.prepare_fs()

    repository = CurriculumRepository(JsonFileStore(config.paths.store_dir))
    if args.reset:
        repository.reset_all()
        print("✅ Progress reset")

    if args.metrics:
        _print_metrics(repository)
        return 0

    while True:
        _print_overview(repository)
        progress = repository.get_or_initialize_progress()
        if progress.curriculum_complete:
            print("\n🏆 All sessions complete!")
            break

        orchestrator = SessionOrchestrator(progress.current_session, repository)
        if not run_session(orchestrator):
            break
        if orchestrator.next_session_number is None:
            print("\n🏆 All sessions complete!")
            break
        if _ask(f"\nContinue to session {orchestrator.next_session_number}? [Y/n]: ").lower() == "n":
            break

    _print_metrics(repository)
    return 0


if __name__ == "__main__":
    sys.exit(main())
