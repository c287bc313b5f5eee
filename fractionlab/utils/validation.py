"""
Schema validation utilities for FractionLab records.

Provides JSON Schema validation with clear error messages for the records the
curriculum persists:
- progress record
- session attempts (with their exercise responses)
- error-log entries

Specialised validators add the cross-field checks a schema cannot express.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from jsonschema import Draft7Validator, FormatChecker, ValidationError

from ..config import config


class ValidationResult:
    """
    Result of a validation attempt.

    Attributes:
        valid: Whether data passed validation
        errors: List of error messages
        data: The validated data
    """

    def __init__(self, valid: bool, errors: list[str], data: Any = None):
        self.valid = valid
        self.errors = errors
        self.data = data

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.valid

    def __str__(self) -> str:
        """Human-readable representation."""
        if self.valid:
            return "✓ Validation passed"
        return f"✗ Validation failed with {len(self.errors)} error(s):\n" + "\n".join(
            f"  - {error}" for error in self.errors
        )

    def raise_for_errors(self) -> None:
        """
        Raise if invalid.

        Raises:
            ValidationError: With all error messages joined
        """
        if not self.valid:
            raise ValidationError("\n".join(self.errors))


class SchemaValidator:
    """
    JSON Schema validator.

    Usage:
        validator = SchemaValidator("path/to/schema.json")
        result = validator.validate(data)
        if not result:
            print(result.errors)
    """

    def __init__(self, schema_path: Path | str):
        """
        Initialize validator with a schema file.

        Args:
            schema_path: Path to JSON Schema file
        """
        self.schema_path = Path(schema_path)
        with open(self.schema_path, "r", encoding="utf-8") as f:
            self.schema = json.load(f)
        # FormatChecker validates date-time strings
        self.validator = Draft7Validator(self.schema, format_checker=FormatChecker())

    def validate(self, data: Any) -> ValidationResult:
        """
        Validate data against schema.

        Args:
            data: Data to validate

        Returns:
            ValidationResult with validation status and any errors
        """
        errors = [
            self._format_error(error)
            for error in sorted(self.validator.iter_errors(data), key=lambda e: list(e.path))
        ]
        if errors:
            return ValidationResult(valid=False, errors=errors, data=data)

        domain_errors = self._check_domain_rules(data)
        if domain_errors:
            return ValidationResult(valid=False, errors=domain_errors, data=data)

        return ValidationResult(valid=True, errors=[], data=data)

    def _check_domain_rules(self, data: Any) -> list[str]:
        """Cross-field checks beyond the schema (override in subclasses)."""
        return []

    def _format_error(self, error: ValidationError) -> str:
        """
        Convert ValidationError to human-readable message with details.

        Args:
            error: jsonschema ValidationError

        Returns:
            Formatted error message with validator and schema path
        """
        path = " -> ".join(str(p) for p in error.path) if error.path else "root"
        validator_name = getattr(error, "validator", "unknown")
        schema_path = "/".join(str(p) for p in error.schema_path)
        return (
            f"At '{path}': {error.message} "
            f"[validator={validator_name}, schema_path=/{schema_path}]"
        )


class ProgressValidator(SchemaValidator):
    """
    Validator for the progress record.

    Domain checks:
    - completed_sessions sorted and unique
    - current_session is one past the highest completed session
    """

    def __init__(self, schema_path: Optional[Path] = None):
        super().__init__(schema_path or config.paths.progress_schema)

    def _check_domain_rules(self, data: dict) -> list[str]:
        errors = []
        completed = data["completed_sessions"]
        if completed != sorted(set(completed)):
            errors.append(
                f"completed_sessions must be sorted and unique, got {completed}"
            )
        if completed and data["current_session"] != min(
            max(completed) + 1, config.curriculum.session_count + 1
        ):
            errors.append(
                f"current_session ({data['current_session']}) inconsistent with "
                f"completed_sessions {completed}"
            )
        return errors


class SessionValidator(SchemaValidator):
    """
    Validator for session attempts.

    Domain checks:
    - a completed session has end_time and quiz results
    - end_time is not before start_time
    """

    def __init__(self, schema_path: Optional[Path] = None):
        super().__init__(schema_path or config.paths.session_schema)

    def _check_domain_rules(self, data: dict) -> list[str]:
        errors = []
        if data["completed"]:
            for key in ("end_time", "quiz_score", "quiz_passed"):
                if data.get(key) is None:
                    errors.append(f"Completed session {data['session_id']} missing {key}")
        if data.get("end_time") and data.get("start_time"):
            start = datetime.fromisoformat(data["start_time"].replace("Z", "+00:00"))
            end = datetime.fromisoformat(data["end_time"].replace("Z", "+00:00"))
            if end < start:
                errors.append(
                    f"Session {data['session_id']} ends before it starts"
                )
        return errors


class ErrorLogValidator(SchemaValidator):
    """Validator for error-log entries."""

    def __init__(self, schema_path: Optional[Path] = None):
        super().__init__(schema_path or config.paths.error_log_schema)


# Cached validator instances
_validators: dict[str, SchemaValidator] = {}


def _get_validator(name: str, cls: type[SchemaValidator]) -> SchemaValidator:
    if name not in _validators:
        _validators[name] = cls()
    return _validators[name]


def validate_progress(data: dict) -> ValidationResult:
    """
    Convenience function to validate a progress record.

    Example:
        >>> result = validate_progress(Progress.initial().to_dict())
        >>> bool(result)
        True
    """
    return _get_validator("progress", ProgressValidator).validate(data)


def validate_session(data: dict) -> ValidationResult:
    """Convenience function to validate a session attempt."""
    return _get_validator("session", SessionValidator).validate(data)


def validate_error_log(data: dict) -> ValidationResult:
    """Convenience function to validate an error-log entry."""
    return _get_validator("error_log", ErrorLogValidator).validate(data)
