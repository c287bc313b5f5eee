"""
Utility modules for FractionLab.

This module contains utility functions:
- fraction_math: gcd/lcm, simplification, decimal conversion, formatting
- comparator: the three comparison methods and the dispatcher
- validation: JSON Schema validation of persisted records
- persistence: key-value stores and the curriculum repository
- progress: analytics helpers for dashboards
"""

from .fraction_math import (
    gcd,
    lcm,
    simplify,
    to_decimal,
    format_fraction,
    scale_to_denominator,
)
from .comparator import (
    compare_benchmark,
    compare_common_denominator,
    compare_cross_multiplication,
    compare_fractions,
    try_benchmark,
)
from .validation import (
    SchemaValidator,
    ValidationResult,
    ProgressValidator,
    SessionValidator,
    ErrorLogValidator,
    validate_progress,
    validate_session,
    validate_error_log,
)
from .persistence import (
    STORAGE_KEYS,
    KeyValueStore,
    InMemoryStore,
    JsonFileStore,
    CurriculumRepository,
    get_repository,
)
from .progress import (
    percent_correct,
    error_rate,
    parse_timestamp,
    session_duration_minutes,
    score_summary,
)

__all__ = [
    # Arithmetic
    "gcd",
    "lcm",
    "simplify",
    "to_decimal",
    "format_fraction",
    "scale_to_denominator",
    # Comparison
    "compare_benchmark",
    "compare_common_denominator",
    "compare_cross_multiplication",
    "compare_fractions",
    "try_benchmark",
    # Validation
    "SchemaValidator",
    "ValidationResult",
    "ProgressValidator",
    "SessionValidator",
    "ErrorLogValidator",
    "validate_progress",
    "validate_session",
    "validate_error_log",
    # Persistence
    "STORAGE_KEYS",
    "KeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "CurriculumRepository",
    "get_repository",
    # Progress analytics
    "percent_correct",
    "error_rate",
    "parse_timestamp",
    "session_duration_minutes",
    "score_summary",
]
