"""
Adaptive difficulty controller.

After every response the controller records an accuracy sample: the percent
correct over the trailing window of responses. Once enough samples exist,
the mean of the most recent ones is compared against a hysteresis band around
the target accuracy:

    mean > target + raise_margin  -> difficulty + step (capped at max)
    mean < target - lower_margin  -> difficulty - step (floored at min)
    otherwise                     -> unchanged

The band is wider below the target than above it, so difficulty drops only
on clearly poor performance.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, List, Optional

from ..config import config


class AdaptiveDifficultyController:
    """Rolling-window accuracy tracker that steps difficulty up or down."""

    def __init__(
        self,
        difficulty: float = 1.0,
        target_accuracy: Optional[float] = None,
        accuracy_samples: Optional[Iterable[float]] = None,
    ):
        """
        Initialize controller.

        Args:
            difficulty: Starting difficulty (clamped to the configured range)
            target_accuracy: Target percent accuracy (default: curriculum target)
            accuracy_samples: Pre-existing accuracy samples, oldest first
        """
        settings = config.adaptive
        self.min_difficulty = settings.min_difficulty
        self.max_difficulty = settings.max_difficulty
        self.step = settings.step
        self.sample_size = settings.sample_size
        self.raise_margin = settings.raise_margin
        self.lower_margin = settings.lower_margin

        self.target_accuracy = (
            config.curriculum.target_accuracy if target_accuracy is None else target_accuracy
        )
        self.difficulty = self._clamp(difficulty)

        self._results: deque[bool] = deque(maxlen=settings.window_size)
        self._samples: deque[float] = deque(accuracy_samples or (), maxlen=settings.window_size)
        self.difficulty_progression: List[float] = [self.difficulty]

    def _clamp(self, value: float) -> float:
        return max(self.min_difficulty, min(self.max_difficulty, value))

    @property
    def accuracy_samples(self) -> List[float]:
        """Retained accuracy samples, oldest first."""
        return list(self._samples)

    def record_result(self, is_correct: bool) -> float:
        """
        Record one response and return the new accuracy sample.

        The sample is the percent correct over the trailing window of responses.
        """
        self._results.append(is_correct)
        accuracy = sum(self._results) / len(self._results) * 100
        self._samples.append(accuracy)
        return accuracy

    def recent_mean(self) -> Optional[float]:
        """Mean of the most recent samples, or None until enough exist."""
        if len(self._samples) < self.sample_size:
            return None
        recent = list(self._samples)[-self.sample_size:]
        return sum(recent) / len(recent)

    def adjust(self) -> float:
        """Apply the hysteresis rule once and return the (possibly new) difficulty."""
        mean = self.recent_mean()
        if mean is None:
            return self.difficulty

        if mean > self.target_accuracy + self.raise_margin and self.difficulty < self.max_difficulty:
            self.difficulty = self._clamp(self.difficulty + self.step)
            self.difficulty_progression.append(self.difficulty)
        elif mean < self.target_accuracy - self.lower_margin and self.difficulty > self.min_difficulty:
            self.difficulty = self._clamp(self.difficulty - self.step)
            self.difficulty_progression.append(self.difficulty)

        return self.difficulty

    def update(self, is_correct: bool) -> float:
        """Record a response, then adjust. Returns the difficulty for the next exercise."""
        self.record_result(is_correct)
        return self.adjust()
