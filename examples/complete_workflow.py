"""
Complete workflow example: Instruction → Practice → Assessment → Metrics

Demonstrates end-to-end integration of all curriculum components with a
simulated learner:
1. Create an in-memory repository
2. Step through the three instruction lessons
3. Answer adaptive practice exercises
4. Take the mastery assessment (retrying on failure)
5. Repeat for all five sessions
6. Print the dashboard metrics
"""

import random
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fractionlab.agents.exercise_generator import ExerciseGenerator
from fractionlab.evaluation.metrics import MetricsAggregator
from fractionlab.orchestrator import (
    CompleteState,
    InstructionState,
    RetryState,
    SessionOrchestrator,
    session_statuses,
)
from fractionlab.utils.comparator import compare_fractions
from fractionlab.utils.persistence import CurriculumRepository, InMemoryStore

SYMBOLS = ("<", "=", ">")


def simulated_answer(orchestrator: SessionOrchestrator, skill: float, rng: random.Random) -> str:
    """Answer correctly with probability `skill`, otherwise pick a wrong symbol."""
    exercise = orchestrator.current_exercise
    truth = compare_fractions(exercise.fraction1, exercise.fraction2)
    if rng.random() < skill:
        return truth
    return rng.choice([s for s in SYMBOLS if s != truth])


def main():
    rng = random.Random(7)
    repository = CurriculumRepository(InMemoryStore())
    generator = ExerciseGenerator(seed=7)
    skill = 0.85

    for session_number in range(1, 6):
        print("=" * 60)
        print(f"SESSION {session_number}")
        print("=" * 60)

        orchestrator = SessionOrchestrator(session_number, repository, generator=generator)

        while not isinstance(orchestrator.state, CompleteState):
            # Instruction: three methods, three steps each
            while isinstance(orchestrator.state, InstructionState):
                if orchestrator.state.step < orchestrator.lesson.last_step:
                    orchestrator.next_step()
                else:
                    print(f"✓ Studied {orchestrator.lesson.method.label}")
                    orchestrator.complete_method()

            # Practice then assessment
            while not isinstance(orchestrator.state, (CompleteState, RetryState)):
                orchestrator.submit_answer(
                    simulated_answer(orchestrator, skill, rng),
                    "Compared the cross products",
                    time_spent_seconds=rng.uniform(20, 90),
                )
                orchestrator.next_exercise()

            result = orchestrator.state.result
            print(f"  Assessment: {result.correct_count}/{result.total} = {result.score:.2f}%")
            if isinstance(orchestrator.state, RetryState):
                print("  ✗ Not passed, retrying")
                skill = min(skill + 0.05, 1.0)
                orchestrator.retry()

        progress = repository.get_or_initialize_progress()
        print(f"✓ Passed. Difficulty now {progress.adaptive_difficulty:.1f}")
        print(f"  Statuses: {session_statuses(progress)}")
        print()

    # ==================== Metrics ====================
    print("=" * 60)
    print("DASHBOARD")
    print("=" * 60)
    metrics = MetricsAggregator(repository).compute()
    for name, value in metrics.to_dict().items():
        print(f"  {name}: {value}")


if __name__ == "__main__":
    main()
