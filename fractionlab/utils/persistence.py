"""
Curriculum persistence with validation.

Provides an abstract key-value store, two implementations (in-memory and JSON
files), and a repository that maps curriculum records onto four logical keys.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import config
from ..models.progress import ErrorLog, Progress, Session
from .validation import validate_error_log, validate_progress, validate_session

logger = logging.getLogger(__name__)


STORAGE_KEYS = {
    "sessions": "fraction_comparison_sessions",
    "progress": "fraction_comparison_progress",
    "metrics": "fraction_comparison_metrics",
    "error_logs": "fraction_comparison_error_logs",
}


class KeyValueStore(ABC):
    """
    Synchronous key-value store holding JSON-serializable values.

    Last write wins; there is no multi-key transaction.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if absent."""

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key; absent keys are ignored."""


class InMemoryStore(KeyValueStore):
    """Dict-backed store. Values are deep-copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = deepcopy(initial) if initial else {}

    def load(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        return deepcopy(value) if value is not None else None

    def save(self, key: str, value: Any) -> None:
        self._data[key] = deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """
    Store with one <key>.json file per key.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace, so a failed save leaves the previous file intact.
    """

    def __init__(self, directory: Optional[Path | str] = None):
        """
        Initialize file store.

        Args:
            directory: Directory for store files (default: config.paths.store_dir)
        """
        self.directory = Path(directory) if directory else config.paths.store_dir
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[Any]:
        filepath = self._path(key)
        if not filepath.exists():
            return None
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load %s, treating as absent: %s", filepath, e)
            return None

    def save(self, key: str, value: Any) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path(key))
        except Exception:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class CurriculumRepository:
    """
    Reads and writes curriculum records through a KeyValueStore.

    Features:
    - Upsert session attempts by session_id
    - Progress read-modify-write with a version counter
    - Append-only error log
    - Validate records against their JSON Schemas before writing
    """

    def __init__(self, store: Optional[KeyValueStore] = None, validate: bool = True):
        """
        Initialize repository.

        Args:
            store: Backing store (default: JsonFileStore in config.paths.store_dir)
            validate: Whether to validate records before saving
        """
        self.store = store if store is not None else JsonFileStore()
        self.validate = validate

    # ==================== Sessions ====================

    def get_sessions(self) -> List[Session]:
        """All stored session attempts, in insertion order."""
        return [Session.from_dict(s) for s in self.store.load(STORAGE_KEYS["sessions"]) or []]

    def save_session(self, session: Session) -> str:
        """
        Insert or replace a session attempt.

        Returns:
            The session_id

        Raises:
            ValidationError: If the session fails validation
        """
        data = session.to_dict()
        if self.validate:
            validate_session(data).raise_for_errors()

        sessions = self.store.load(STORAGE_KEYS["sessions"]) or []
        index = next(
            (i for i, s in enumerate(sessions) if s["session_id"] == session.session_id),
            None,
        )
        if index is None:
            sessions.append(data)
        else:
            sessions[index] = data
        self.store.save(STORAGE_KEYS["sessions"], sessions)
        return session.session_id

    # ==================== Progress ====================

    def get_progress(self) -> Optional[Progress]:
        """
        Stored progress, or None if the learner has not started.

        Raises:
            ValidationError: If the stored record is invalid
        """
        data = self.store.load(STORAGE_KEYS["progress"])
        if data is None:
            return None
        if self.validate:
            validate_progress(data).raise_for_errors()
        return Progress.from_dict(data)

    def get_or_initialize_progress(self) -> Progress:
        """Stored progress, or the default progress if none is stored."""
        return self.get_progress() or Progress.initial()

    def save_progress(self, progress: Progress) -> Progress:
        """
        Write progress wholesale.

        Returns:
            The saved Progress with its version bumped

        Raises:
            ValidationError: If the record fails validation
        """
        saved = replace(progress, version=progress.version + 1)
        data = saved.to_dict()
        if self.validate:
            validate_progress(data).raise_for_errors()
        self.store.save(STORAGE_KEYS["progress"], data)
        return saved

    # ==================== Error log ====================

    def get_error_logs(self) -> List[ErrorLog]:
        return [ErrorLog.from_dict(e) for e in self.store.load(STORAGE_KEYS["error_logs"]) or []]

    def append_error_log(self, entry: ErrorLog) -> None:
        """
        Append one entry to the error log.

        Raises:
            ValidationError: If the entry fails validation
        """
        data = entry.to_dict()
        if self.validate:
            validate_error_log(data).raise_for_errors()
        logs = self.store.load(STORAGE_KEYS["error_logs"]) or []
        logs.append(data)
        self.store.save(STORAGE_KEYS["error_logs"], logs)

    # ==================== Reset ====================

    def reset_all(self) -> None:
        """Delete every logical key."""
        for key in STORAGE_KEYS.values():
            self.store.delete(key)
        logger.info("Cleared all stored curriculum data")


# Global repository instance
_repository: Optional[CurriculumRepository] = None


def get_repository() -> CurriculumRepository:
    """Get or create the global repository over the default file store."""
    global _repository
    if _repository is None:
        _repository = CurriculumRepository()
    return _repository
