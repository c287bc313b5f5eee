"""
Exercise agents for the fraction-comparison curriculum.

This module contains the components that produce and judge learner work:
- Exercise generation (difficulty-tiered fraction pairs)
- Grading (submission validation, scoring, error classification)
- Instruction (worked-example lessons for each comparison method)

Note: practice and assessment rounds are in fractionlab.models (pure state,
not an agent)
"""

from .exercise_generator import (
    Exercise,
    ExerciseGenerator,
    difficulty_band,
    tier_for_difficulty,
)
from .grading_agent import (
    GradingAgent,
    GradingResult,
    IncompleteSubmissionError,
    classify_error,
    validate_submission,
)
from .instructor import (
    Instructor,
    InstructionStep,
    Lesson,
    worked_example,
)

__all__ = [
    # Generation
    "Exercise",
    "ExerciseGenerator",
    "difficulty_band",
    "tier_for_difficulty",
    # Grading
    "GradingAgent",
    "GradingResult",
    "IncompleteSubmissionError",
    "classify_error",
    "validate_submission",
    # Instruction
    "Instructor",
    "InstructionStep",
    "Lesson",
    "worked_example",
]
