"""
Attempt persistence for scored quiz attempts.

Attempts are immutable once stored. Saving an attempt id that already
exists returns the stored record unchanged, so a learner whose submit
request is retried after a network failure is scored and stored once.
JSON attempts are stored as files in ~/.quizmark/attempts/ by default.
"""

from __future__ import annotations

import json
import re
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Protocol

from loguru import logger
from pydantic import ConfigDict, ValidationError

from config import get_settings
from quizmark.core.scorer import AttemptResult
from quizmark.models import QuizModel

_ATTEMPT_ID = re.compile(r"[A-Za-z0-9_-]{1,128}")


class AttemptRecord(QuizModel):
    """A scored attempt together with who made it and when."""

    model_config = ConfigDict(frozen=True)

    attempt_id: str
    quiz_id: str
    user_id: str
    user_name: str = "Anonymous"
    result: AttemptResult
    completed_at: datetime

    @property
    def score(self) -> float:
        return self.result.score

    @property
    def total_points(self) -> int:
        return self.result.total_points

    @property
    def percentage(self) -> int:
        return self.result.percentage

    @property
    def time_taken(self) -> float:
        return self.result.elapsed_seconds

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AttemptRecord":
        """Create from dictionary."""
        return cls.model_validate(data)


class AttemptStore(Protocol):
    """What the submission service needs from storage."""

    def save(self, record: AttemptRecord) -> AttemptRecord:
        """Store a record; return the existing one if the id is taken."""
        ...

    def load(self, attempt_id: str) -> Optional[AttemptRecord]:
        """Load one attempt by id."""
        ...

    def list_for_quiz(self, quiz_id: str) -> list[AttemptRecord]:
        """All attempts for a quiz, most recent first."""
        ...


def _newest_first(records: list[AttemptRecord]) -> list[AttemptRecord]:
    return sorted(records, key=lambda r: (r.completed_at, r.attempt_id), reverse=True)


class InMemoryAttemptStore:
    """Process-local store, mainly for tests and embedding."""

    def __init__(self) -> None:
        self._records: dict[str, AttemptRecord] = {}
        self._lock = threading.Lock()

    def save(self, record: AttemptRecord) -> AttemptRecord:
        with self._lock:
            existing = self._records.get(record.attempt_id)
            if existing is not None:
                logger.info(f"Attempt {record.attempt_id} already stored, keeping the original")
                return existing
            self._records[record.attempt_id] = record
        logger.info(f"Stored attempt {record.attempt_id} for quiz {record.quiz_id}")
        return record

    def load(self, attempt_id: str) -> Optional[AttemptRecord]:
        with self._lock:
            return self._records.get(attempt_id)

    def list_for_quiz(self, quiz_id: str) -> list[AttemptRecord]:
        with self._lock:
            records = [r for r in self._records.values() if r.quiz_id == quiz_id]
        return _newest_first(records)


class JsonAttemptStore:
    """
    Manages attempt persistence on disk.

    Attempts are stored as JSON files with naming: {attempt_id}.json
    Files are created exclusively, so two concurrent saves of the same
    attempt id cannot both win.
    """

    def __init__(self, attempt_dir: Optional[Path] = None):
        self.attempt_dir = Path(attempt_dir) if attempt_dir else get_settings().attempts_dir
        self.attempt_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, attempt_id: str) -> Path:
        if not _ATTEMPT_ID.fullmatch(attempt_id):
            raise ValueError(f"Invalid attempt id: {attempt_id!r}")
        return self.attempt_dir / f"{attempt_id}.json"

    def save(self, record: AttemptRecord) -> AttemptRecord:
        """Save an attempt to disk unless it already exists."""
        filepath = self._path(record.attempt_id)
        try:
            with open(filepath, "x", encoding="utf-8") as f:
                json.dump(record.to_dict(), f, indent=2)
        except FileExistsError:
            existing = self.load(record.attempt_id)
            if existing is None:
                raise
            logger.info(f"Attempt {record.attempt_id} already stored, keeping the original")
            return existing

        logger.info(f"Stored attempt {record.attempt_id} for quiz {record.quiz_id} at {filepath}")
        return record

    def load(self, attempt_id: str) -> Optional[AttemptRecord]:
        """Load a specific attempt by ID."""
        filepath = self._path(attempt_id)
        if not filepath.exists():
            return None
        return self._read(filepath)

    def list_for_quiz(self, quiz_id: str) -> list[AttemptRecord]:
        """Get every readable attempt for a quiz, most recent first."""
        records = []
        for filepath in self.attempt_dir.glob("*.json"):
            record = self._read(filepath)
            if record is not None and record.quiz_id == quiz_id:
                records.append(record)
        return _newest_first(records)

    def _read(self, filepath: Path) -> Optional[AttemptRecord]:
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
            return AttemptRecord.from_dict(data)
        except (json.JSONDecodeError, ValidationError, OSError) as e:
            logger.warning(f"Skipping unreadable attempt file {filepath.name}: {e}")
            return None
