"""
Data models for the fraction-comparison curriculum.

This module contains core data models:
- Fraction / ComparisonMethod: value types shared by every component
- Progress, Session, ExerciseResponse, ErrorLog: persisted records
- AdaptiveDifficultyController: rolling-accuracy difficulty tuning

Practice and assessment rounds live in models.practice_session; they depend
on the agents package and are imported from there directly.
"""

from .fraction import (
    COMPARISON_SYMBOLS,
    METHOD_ORDER,
    Comparison,
    ComparisonMethod,
    Fraction,
    InvalidFractionError,
)
from .progress import ErrorLog, ExerciseResponse, Progress, Session
from .adaptive_difficulty import AdaptiveDifficultyController

__all__ = [
    "COMPARISON_SYMBOLS",
    "METHOD_ORDER",
    "Comparison",
    "ComparisonMethod",
    "Fraction",
    "InvalidFractionError",
    "ErrorLog",
    "ExerciseResponse",
    "Progress",
    "Session",
    "AdaptiveDifficultyController",
]
