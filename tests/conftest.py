"""
Shared pytest fixtures and configuration for FractionLab tests.

This file is automatically discovered by pytest and provides
fixtures available to all tests.
"""

import pytest
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent))

from fractionlab.agents.exercise_generator import ExerciseGenerator
from fractionlab.models.progress import ExerciseResponse, Session
from fractionlab.utils.persistence import CurriculumRepository, InMemoryStore


@pytest.fixture
def repository():
    """
    Fixture providing a validating repository over an empty in-memory store.

    Returns:
        CurriculumRepository: Fresh repository per test
    """
    return CurriculumRepository(InMemoryStore())


@pytest.fixture
def generator():
    """Fixture providing a seeded exercise generator for reproducible pairs."""
    return ExerciseGenerator(seed=42)


@pytest.fixture
def make_response():
    """
    Factory fixture for ExerciseResponse objects.

    Usage:
        response = make_response(is_correct=False)
    """
    counter = {"n": 0}

    def _make(is_correct: bool = True, answer: str = "<", error_type=None):
        counter["n"] += 1
        if not is_correct and error_type is None:
            error_type = "reversed-comparison"
        return ExerciseResponse(
            exercise_id=f"ex-{counter['n']}",
            answer=answer,
            justification="Compared to one half",
            is_correct=is_correct,
            time_spent_seconds=12.5,
            error_type=None if is_correct else error_type,
        )

    return _make


@pytest.fixture
def make_session(make_response):
    """
    Factory fixture for finished Session attempts.

    Args (of the returned callable):
        session_number: 1-5
        correct / incorrect: Number of correct and incorrect exercises
        minutes: Duration between start and end
        score: quiz_score (None leaves the session unscored)
    """

    def _make(session_number=1, correct=10, incorrect=0, minutes=45, score=None, completed=True):
        start = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        session = Session(session_number=session_number, start_time=start.isoformat())
        session.add_responses(
            [make_response(True) for _ in range(correct)]
            + [make_response(False) for _ in range(incorrect)]
        )
        if completed:
            end = (start + timedelta(minutes=minutes)).isoformat()
            passed = None if score is None else score >= 90
            session.finalize(score, passed, end_time=end)
        return session

    return _make


@pytest.fixture
def temp_schema_file(tmp_path):
    """
    Fixture providing a temporary schema file for testing.

    Args:
        tmp_path: pytest's tmp_path fixture

    Returns:
        Path: Path to temporary schema file
    """
    import json

    schema = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "properties": {"test": {"type": "string"}},
        "required": ["test"],
    }

    schema_file = tmp_path / "test.schema.json"
    with open(schema_file, "w") as f:
        json.dump(schema, f)

    return schema_file


# Pytest hooks for better test output


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark tests in unit/ directory as unit tests
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        # Mark tests in integration/ directory as integration tests
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
