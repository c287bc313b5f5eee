"""
Configuration management for FractionLab.

This module centralizes all configuration settings:
- Curriculum constants (session count, exercise counts, mastery threshold)
- Adaptive difficulty controller parameters
- Exercise generator tiers and randomness
- Dashboard metric targets
- File system paths and logging
- Env-driven overrides loaded from a .env file
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else None


@dataclass
class CurriculumConfig:
    """Shape of the five-session mastery curriculum."""

    session_count: int = 5
    practice_exercise_count: int = 10
    assessment_exercise_count: int = 12
    mastery_threshold: float = 90.0  # % required to pass an assessment
    target_accuracy: float = field(
        default_factory=lambda: float(os.getenv("TARGET_ACCURACY", "82.5"))
    )
    instruction_steps: int = 3  # intro, worked example, strategy tip

    # Assessment cycles through difficulties 2, 3, 4
    assessment_base_difficulty: int = 2
    assessment_difficulty_span: int = 3


@dataclass
class AdaptiveConfig:
    """Hysteresis-band difficulty controller settings."""

    min_difficulty: float = 1.0
    max_difficulty: float = 5.0
    step: float = 0.5
    window_size: int = 5  # responses per accuracy sample, and samples retained
    sample_size: int = 3  # samples averaged before adjusting
    raise_margin: float = 5.0  # raise when mean > target + margin
    lower_margin: float = 10.0  # lower when mean < target - margin


@dataclass(frozen=True)
class DifficultyTier:
    """Generation constraints for one difficulty band."""

    min_denominator: int
    max_denominator: int
    minimum_gap: float


@dataclass
class GeneratorConfig:
    """Exercise pair generation settings."""

    # Keyed by rounded difficulty upper bound: <=2, ==3, >=4
    easy_tier: DifficultyTier = DifficultyTier(2, 6, 0.3)
    medium_tier: DifficultyTier = DifficultyTier(4, 10, 0.2)
    hard_tier: DifficultyTier = DifficultyTier(6, 12, 0.1)

    max_attempts: int = 20
    swap_probability: float = 0.5
    simplify: bool = True

    # Reproducibility
    random_seed: Optional[int] = field(
        default_factory=lambda: _optional_int("FRACTIONLAB_RANDOM_SEED")
    )


@dataclass
class MetricTargets:
    """Dashboard thresholds: >= success is green, < failure is red, else warning."""

    mastery_success: float = 75.0
    mastery_failure: float = 50.0
    error_reduction_success: float = 40.0
    error_reduction_failure: float = 20.0
    engagement_success: float = 90.0
    engagement_failure: float = 70.0

    # Target session length in minutes (inclusive)
    engagement_min_minutes: float = 30.0
    engagement_max_minutes: float = 60.0


@dataclass
class PathConfig:
    """File system paths - single source of truth for all directories."""

    project_root: Path = field(default_factory=lambda: Path(__file__).parent.parent)
    data_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv(
                "FRACTIONLAB_DATA_DIR", str(Path(__file__).parent.parent / "data")
            )
        )
    )

    store_dir: Path = field(init=False)
    schemas_dir: Path = field(init=False)
    progress_schema: Path = field(init=False)
    session_schema: Path = field(init=False)
    error_log_schema: Path = field(init=False)

    def __post_init__(self):
        """Initialize computed paths."""
        self.store_dir = self.data_dir / "store"
        self.schemas_dir = self.project_root / "schemas"
        self.progress_schema = self.schemas_dir / "progress.schema.json"
        self.session_schema = self.schemas_dir / "session.schema.json"
        self.error_log_schema = self.schemas_dir / "error_log.schema.json"

    def prepare_filesystem(self):
        """
        Create directories if they don't exist.

        Separated from __post_init__ to avoid side-effects on import.
        Call this explicitly from your app entrypoint.
        """
        for directory in [self.data_dir, self.store_dir]:
            directory.mkdir(parents=True, exist_ok=True)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"


class Config:
    """
    Main configuration class. Singleton pattern.

    Usage:
        from fractionlab.config import config

        # Access settings
        threshold = config.curriculum.mastery_threshold
        step = config.adaptive.step

        # Prepare filesystem (call once at startup)
        config.prepare_fs()
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.paths = PathConfig()
            cls._instance.curriculum = CurriculumConfig()
            cls._instance.adaptive = AdaptiveConfig()
            cls._instance.generator = GeneratorConfig()
            cls._instance.metrics = MetricTargets()
            cls._instance.logging = LoggingConfig()

        return cls._instance

    def prepare_fs(self):
        """Prepare filesystem (create directories). Call once at startup."""
        self.paths.prepare_filesystem()

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        # Curriculum validation
        if self.curriculum.session_count < 1:
            errors.append(
                f"session_count must be >= 1, got {self.curriculum.session_count}"
            )

        if self.curriculum.practice_exercise_count < 1:
            errors.append(
                f"practice_exercise_count must be >= 1, got {self.curriculum.practice_exercise_count}"
            )

        if self.curriculum.assessment_exercise_count < 1:
            errors.append(
                f"assessment_exercise_count must be >= 1, got {self.curriculum.assessment_exercise_count}"
            )

        if not (0 <= self.curriculum.mastery_threshold <= 100):
            errors.append(
                f"mastery_threshold must be in [0, 100], got {self.curriculum.mastery_threshold}"
            )

        if not (0 <= self.curriculum.target_accuracy <= 100):
            errors.append(
                f"target_accuracy must be in [0, 100], got {self.curriculum.target_accuracy}"
            )

        # Adaptive validation
        if self.adaptive.min_difficulty >= self.adaptive.max_difficulty:
            errors.append(
                f"min_difficulty ({self.adaptive.min_difficulty}) must be < max_difficulty ({self.adaptive.max_difficulty})"
            )

        if self.adaptive.step <= 0:
            errors.append(f"adaptive step must be > 0, got {self.adaptive.step}")

        if self.adaptive.sample_size > self.adaptive.window_size:
            errors.append(
                f"sample_size ({self.adaptive.sample_size}) must be <= window_size ({self.adaptive.window_size})"
            )

        # Generator validation
        for name in ("easy_tier", "medium_tier", "hard_tier"):
            tier = getattr(self.generator, name)
            if tier.min_denominator < 2:
                errors.append(
                    f"{name} min_denominator must be >= 2, got {tier.min_denominator}"
                )
            if tier.min_denominator > tier.max_denominator:
                errors.append(
                    f"{name} min_denominator ({tier.min_denominator}) must be <= max_denominator ({tier.max_denominator})"
                )
            if not (0 <= tier.minimum_gap < 1):
                errors.append(
                    f"{name} minimum_gap must be in [0, 1), got {tier.minimum_gap}"
                )

        tiers = (self.generator.easy_tier, self.generator.medium_tier, self.generator.hard_tier)
        if any(a.minimum_gap < b.minimum_gap for a, b in zip(tiers, tiers[1:])):
            errors.append("tier minimum_gap must not increase with difficulty")
        if any(a.max_denominator > b.max_denominator for a, b in zip(tiers, tiers[1:])):
            errors.append("tier max_denominator must not decrease with difficulty")

        if self.generator.max_attempts < 1:
            errors.append(
                f"generator max_attempts must be >= 1, got {self.generator.max_attempts}"
            )

        if not (0 <= self.generator.swap_probability <= 1):
            errors.append(
                f"swap_probability must be in [0, 1], got {self.generator.swap_probability}"
            )

        # Metric targets
        if self.metrics.engagement_min_minutes > self.metrics.engagement_max_minutes:
            errors.append(
                f"engagement_min_minutes ({self.metrics.engagement_min_minutes}) must be <= engagement_max_minutes ({self.metrics.engagement_max_minutes})"
            )

        # Path validation
        for schema in (
            self.paths.progress_schema,
            self.paths.session_schema,
            self.paths.error_log_schema,
        ):
            if not schema.exists():
                errors.append(f"Schema not found: {schema}")

        if not isinstance(logging.getLevelName(self.logging.log_level.upper()), int):
            errors.append(f"Unknown log_level: {self.logging.log_level}")

        return errors


# Global config instance
config = Config()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Apply LoggingConfig to the root logger.

    Args:
        level: Optional override for config.logging.log_level
    """
    log_level = (level or config.logging.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=config.logging.log_format,
        datefmt=config.logging.date_format,
    )
