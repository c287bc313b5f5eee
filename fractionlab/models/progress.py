"""
Curriculum records: exercise responses, session attempts, error logs and
learner progress.

All records round-trip through plain JSON dictionaries (snake_case keys,
ISO 8601 UTC timestamps) so they can be written to any key-value store.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from ..config import config
from .fraction import Comparison


SessionStatus = Literal["completed", "current", "locked", "available"]


def utc_now() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ExerciseResponse:
    """
    Learner's graded answer to one exercise.

    Attributes:
        exercise_id: Exercise identifier
        answer: '<', '=' or '>'
        justification: Learner's explanation (non-empty)
        is_correct: Whether answer matches the exercise's correct answer
        time_spent_seconds: Time between presentation and submission
        error_type: Classification of the mistake (None when correct)
    """
    exercise_id: str
    answer: Comparison
    justification: str
    is_correct: bool
    time_spent_seconds: float = 0.0
    error_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "exercise_id": self.exercise_id,
            "answer": self.answer,
            "justification": self.justification,
            "is_correct": self.is_correct,
            "time_spent_seconds": self.time_spent_seconds,
            "error_type": self.error_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExerciseResponse:
        """Create from dictionary."""
        return cls(
            exercise_id=data["exercise_id"],
            answer=data["answer"],
            justification=data["justification"],
            is_correct=data["is_correct"],
            time_spent_seconds=data.get("time_spent_seconds", 0.0),
            error_type=data.get("error_type"),
        )


@dataclass(frozen=True)
class ErrorLog:
    """One incorrect response, appended to the error log."""
    session_number: int
    exercise_id: str
    error_type: str
    timestamp: str = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "session_number": self.session_number,
            "exercise_id": self.exercise_id,
            "error_type": self.error_type,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ErrorLog:
        """Create from dictionary."""
        return cls(
            session_number=data["session_number"],
            exercise_id=data["exercise_id"],
            error_type=data["error_type"],
            timestamp=data["timestamp"],
        )


@dataclass
class Session:
    """
    One attempt at a numbered session.

    Mutated in place while the attempt runs; finalized when its assessment
    concludes (end_time set, completed=True, quiz fields filled in).
    """
    session_number: int
    session_id: str = field(default_factory=lambda: f"session-{uuid.uuid4()}")
    attempt: int = 1
    start_time: str = field(default_factory=utc_now)
    end_time: Optional[str] = None
    completed: bool = False
    exercises: List[ExerciseResponse] = field(default_factory=list)
    quiz_score: Optional[float] = None
    quiz_passed: Optional[bool] = None

    def __post_init__(self):
        if not (1 <= self.session_number <= config.curriculum.session_count):
            raise ValueError(
                f"session_number must be in [1, {config.curriculum.session_count}], got {self.session_number}"
            )

    def add_responses(self, responses: List[ExerciseResponse]) -> None:
        """Append graded responses in order."""
        self.exercises.extend(responses)

    def finalize(self, score: float, passed: bool, end_time: Optional[str] = None) -> None:
        """Close the attempt with its assessment outcome."""
        self.end_time = end_time or utc_now()
        self.completed = True
        self.quiz_score = score
        self.quiz_passed = passed

    @property
    def incorrect_count(self) -> int:
        return sum(1 for r in self.exercises if not r.is_correct)

    def to_dict(self) -> Dict[str, Any]:
        """Convert session to dictionary for persistence."""
        return {
            "session_id": self.session_id,
            "session_number": self.session_number,
            "attempt": self.attempt,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "completed": self.completed,
            "exercises": [r.to_dict() for r in self.exercises],
            "quiz_score": self.quiz_score,
            "quiz_passed": self.quiz_passed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Session:
        """Create from dictionary."""
        return cls(
            session_number=data["session_number"],
            session_id=data["session_id"],
            attempt=data.get("attempt", 1),
            start_time=data["start_time"],
            end_time=data.get("end_time"),
            completed=data.get("completed", False),
            exercises=[ExerciseResponse.from_dict(r) for r in data.get("exercises", [])],
            quiz_score=data.get("quiz_score"),
            quiz_passed=data.get("quiz_passed"),
        )


@dataclass(frozen=True)
class Progress:
    """
    Learner progress through the curriculum.

    Immutable: every change returns a new Progress. `version` counts saves and
    is bumped by the repository, not by the with_* helpers.
    """
    current_session: int = 1
    completed_sessions: tuple[int, ...] = ()
    adaptive_difficulty: float = 1.0
    last_practice_accuracy: float = 0.0
    version: int = 0

    @classmethod
    def initial(cls) -> Progress:
        """Default progress for a learner who has not started."""
        return cls()

    def with_difficulty(self, difficulty: float) -> Progress:
        """Record the adaptive controller's current difficulty."""
        return replace(self, adaptive_difficulty=difficulty)

    def with_practice_result(self, accuracy: float, difficulty: Optional[float] = None) -> Progress:
        """Record a finished practice round."""
        return replace(
            self,
            last_practice_accuracy=accuracy,
            adaptive_difficulty=self.adaptive_difficulty if difficulty is None else difficulty,
        )

    def with_completed_session(self, session_number: int) -> Progress:
        """
        Merge a passed session into completed_sessions.

        The merged list is deduplicated, limited to valid session numbers and
        sorted; current_session becomes max(completed) + 1, capped one past the
        last session.
        """
        session_count = config.curriculum.session_count
        completed = sorted(
            {
                n
                for n in (*self.completed_sessions, session_number)
                if 1 <= n <= session_count
            }
        )
        current = (
            min(max(completed) + 1, session_count + 1) if completed else self.current_session
        )
        return replace(self, completed_sessions=tuple(completed), current_session=current)

    def session_status(self, session_number: int) -> SessionStatus:
        """Status of a session card: completed, current, locked or available."""
        if session_number in self.completed_sessions:
            return "completed"
        if session_number == self.current_session:
            return "current"
        if session_number > self.current_session:
            return "locked"
        return "available"

    def is_unlocked(self, session_number: int) -> bool:
        return self.session_status(session_number) != "locked"

    @property
    def curriculum_complete(self) -> bool:
        return len(self.completed_sessions) == config.curriculum.session_count

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for persistence."""
        return {
            "current_session": self.current_session,
            "completed_sessions": list(self.completed_sessions),
            "adaptive_difficulty": self.adaptive_difficulty,
            "last_practice_accuracy": self.last_practice_accuracy,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Progress:
        """Create from dictionary."""
        return cls(
            current_session=data["current_session"],
            completed_sessions=tuple(data.get("completed_sessions", [])),
            adaptive_difficulty=float(data.get("adaptive_difficulty", 1.0)),
            last_practice_accuracy=float(data.get("last_practice_accuracy", 0.0)),
            version=data.get("version", 0),
        )
