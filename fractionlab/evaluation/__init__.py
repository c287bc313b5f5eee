"""
Evaluation Module for FractionLab

Dashboard metrics computed from stored session history.

Modules:
- metrics: mastery rate, error reduction, engagement efficiency and their
  dashboard status
"""

from .metrics import (
    CurriculumMetrics,
    MetricsAggregator,
    compute_metrics,
    engagement_efficiency,
    error_rates_by_session,
    error_reduction,
    mastery_rate,
    metric_status,
)

__all__ = [
    "CurriculumMetrics",
    "MetricsAggregator",
    "compute_metrics",
    "engagement_efficiency",
    "error_rates_by_session",
    "error_reduction",
    "mastery_rate",
    "metric_status",
]
