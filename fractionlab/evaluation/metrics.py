"""
Curriculum Metrics Module

Derives the dashboard statistics from the stored session history. Metrics are
never stored: every call makes a fresh read-only pass over the sessions and
error log.

This module implements:
1. Mastery rate (final-session assessments at or above the mastery threshold)
2. Error reduction (first vs. last per-session error rate)
3. Engagement efficiency (completed sessions of a target length)
4. Dashboard status classification (success / warning / failure)
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Literal, Optional

import numpy as np

from ..config import config
from ..models.progress import ErrorLog, ExerciseResponse, Session
from ..utils.persistence import CurriculumRepository, get_repository
from ..utils.progress import error_rate, score_summary, session_duration_minutes

logger = logging.getLogger(__name__)


MetricStatus = Literal["success", "warning", "failure"]


# ==================== Data Classes ====================

@dataclass
class CurriculumMetrics:
    """Headline metrics plus the breakdowns shown beside them."""
    mastery_rate: float  # 0-100
    error_reduction: float  # percent, negative if errors increased
    engagement_efficiency: float  # 0-100
    sessions: int
    error_logs: int
    error_rates_by_session: Dict[int, float] = field(default_factory=dict)
    error_type_counts: Dict[str, int] = field(default_factory=dict)
    quiz_score_summary: Dict[str, float] = field(default_factory=dict)

    def statuses(self) -> Dict[str, MetricStatus]:
        """Dashboard status of each headline metric."""
        targets = config.metrics
        return {
            "mastery_rate": metric_status(
                self.mastery_rate, targets.mastery_success, targets.mastery_failure
            ),
            "error_reduction": metric_status(
                self.error_reduction,
                targets.error_reduction_success,
                targets.error_reduction_failure,
            ),
            "engagement_efficiency": metric_status(
                self.engagement_efficiency,
                targets.engagement_success,
                targets.engagement_failure,
            ),
        }

    def to_dict(self) -> Dict:
        return {
            "mastery_rate": self.mastery_rate,
            "error_reduction": self.error_reduction,
            "engagement_efficiency": self.engagement_efficiency,
            "sessions": self.sessions,
            "error_logs": self.error_logs,
            "error_rates_by_session": dict(self.error_rates_by_session),
            "error_type_counts": dict(self.error_type_counts),
            "quiz_score_summary": dict(self.quiz_score_summary),
            "statuses": self.statuses(),
        }


def metric_status(value: float, success: float, failure: float) -> MetricStatus:
    """
    Classify a metric against its thresholds.

    >= success is "success", < failure is "failure", anything between is
    "warning".
    """
    if value >= success:
        return "success"
    if value < failure:
        return "failure"
    return "warning"


# ==================== Individual metrics ====================

def mastery_rate(sessions: Iterable[Session], threshold: Optional[float] = None) -> float:
    """
    Percentage of scored final-session attempts that reached mastery.

    Returns 0 when no final-session attempt has a score.
    """
    threshold = config.curriculum.mastery_threshold if threshold is None else threshold
    final_session = config.curriculum.session_count
    scores = np.array(
        [
            s.quiz_score
            for s in sessions
            if s.session_number == final_session and s.quiz_score is not None
        ],
        dtype=float,
    )
    if scores.size == 0:
        return 0.0
    return float(np.mean(scores >= threshold) * 100)


def error_rates_by_session(sessions: Iterable[Session]) -> Dict[int, float]:
    """
    Error rate (incorrect / total exercises x 100) for each session number.

    Attempts sharing a session number are pooled. Session numbers with no
    recorded exercises are left out.
    """
    pooled: Dict[int, List[ExerciseResponse]] = {}
    for session in sessions:
        if session.exercises:
            pooled.setdefault(session.session_number, []).extend(session.exercises)

    return {number: error_rate(responses) for number, responses in sorted(pooled.items())}


def error_reduction(sessions: Iterable[Session]) -> float:
    """
    Relative drop from the first to the last session's error rate, in percent.

    Returns 0 with fewer than two session numbers, or when the first rate is 0.
    """
    rates = list(error_rates_by_session(sessions).values())
    if len(rates) < 2:
        return 0.0
    first, last = rates[0], rates[-1]
    if first == 0:
        return 0.0
    return (first - last) / first * 100


def engagement_efficiency(
    sessions: Iterable[Session],
    min_minutes: Optional[float] = None,
    max_minutes: Optional[float] = None,
) -> float:
    """
    Percentage of completed, timed sessions lasting between min and max minutes
    (inclusive).
    """
    min_minutes = config.metrics.engagement_min_minutes if min_minutes is None else min_minutes
    max_minutes = config.metrics.engagement_max_minutes if max_minutes is None else max_minutes

    durations = np.array(
        [
            duration
            for duration in (session_duration_minutes(s) for s in sessions if s.completed)
            if duration is not None
        ],
        dtype=float,
    )
    if durations.size == 0:
        return 0.0
    in_range = (durations >= min_minutes) & (durations <= max_minutes)
    return float(np.mean(in_range) * 100)


# ==================== Aggregation ====================

def compute_metrics(
    sessions: List[Session],
    error_logs: Optional[List[ErrorLog]] = None,
) -> CurriculumMetrics:
    """
    Compute all dashboard metrics from session and error-log history.

    Example:
        >>> compute_metrics([]).mastery_rate
        0.0
    """
    error_logs = error_logs or []
    scores = [s.quiz_score for s in sessions if s.quiz_score is not None]
    metrics = CurriculumMetrics(
        mastery_rate=round(mastery_rate(sessions), 2),
        error_reduction=round(error_reduction(sessions), 2),
        engagement_efficiency=round(engagement_efficiency(sessions), 2),
        sessions=len(sessions),
        error_logs=len(error_logs),
        error_rates_by_session={
            number: round(rate, 2) for number, rate in error_rates_by_session(sessions).items()
        },
        error_type_counts=dict(Counter(e.error_type for e in error_logs)),
        quiz_score_summary=score_summary(scores),
    )
    logger.debug(
        "Computed metrics over %d sessions: mastery=%.2f reduction=%.2f engagement=%.2f",
        metrics.sessions,
        metrics.mastery_rate,
        metrics.error_reduction,
        metrics.engagement_efficiency,
    )
    return metrics


class MetricsAggregator:
    """
    Reads history from a repository and computes metrics on demand.

    Usage:
        aggregator = MetricsAggregator(repository)
        metrics = aggregator.compute()
        print(metrics.statuses())
    """

    def __init__(self, repository: Optional[CurriculumRepository] = None):
        """
        Initialize aggregator.

        Args:
            repository: Curriculum repository (default: global repository)
        """
        self.repository = repository or get_repository()

    def compute(self) -> CurriculumMetrics:
        """Compute metrics from the repository's current history."""
        return compute_metrics(
            self.repository.get_sessions(),
            self.repository.get_error_logs(),
        )
