"""
Progress analytics helpers for dashboards and reporting.

Provides:
- Percent-correct and error-rate over a list of responses
- Session duration from ISO 8601 timestamps
- Summary statistics (mean, median, min, max)
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..models.progress import ExerciseResponse, Session


def percent_correct(responses: List[ExerciseResponse]) -> float:
    """
    Percentage of correct responses (0 for an empty list).

    Example:
        >>> percent_correct([])
        0.0
    """
    if not responses:
        return 0.0
    return sum(1 for r in responses if r.is_correct) * 100 / len(responses)


def error_rate(responses: List[ExerciseResponse]) -> float:
    """Percentage of incorrect responses (0 for an empty list)."""
    if not responses:
        return 0.0
    return sum(1 for r in responses if not r.is_correct) * 100 / len(responses)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting a trailing 'Z'."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def session_duration_minutes(session: Session) -> Optional[float]:
    """Wall-clock length of a session in minutes, or None if it has not ended."""
    if not session.start_time or not session.end_time:
        return None
    elapsed = parse_timestamp(session.end_time) - parse_timestamp(session.start_time)
    return elapsed.total_seconds() / 60.0


def score_summary(values: Iterable[float]) -> Dict[str, float]:
    """
    Calculate summary statistics for a set of scores.

    Returns:
        Dict with mean, median, min, max, std_dev, count

    Example:
        >>> score_summary([75.0, 91.67, 100.0])["median"]
        91.67
    """
    values = sorted(values)
    if not values:
        return {
            "mean": 0.0,
            "median": 0.0,
            "min": 0.0,
            "max": 0.0,
            "std_dev": 0.0,
            "count": 0,
        }

    n = len(values)
    mean_val = sum(values) / n

    if n % 2 == 1:
        median_val = values[n // 2]
    else:
        median_val = (values[n // 2 - 1] + values[n // 2]) / 2.0

    variance = sum((v - mean_val) ** 2 for v in values) / n

    return {
        "mean": round(mean_val, 2),
        "median": round(median_val, 2),
        "min": round(values[0], 2),
        "max": round(values[-1], 2),
        "std_dev": round(math.sqrt(variance), 2),
        "count": n,
    }
