"""
Session Records
===============

Summaries of finished sessions and the stores that keep them.

Usage:
    from gaprunner.gap_core import GameSession, JsonRecordStore

    store = JsonRecordStore("records/gaprunner_records.json")
    session = GameSession("uniform", record_store=store)
    ...
    for record in store.fetch_all():
        print(record.score, record.format_duration())
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from gaprunner.gap_core.config_loader import GameMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundRecord:
    """
    Immutable summary of one finished session.

    Created once when the player runs out of lives and handed to a RecordStore.
    """
    id: str
    score: int
    mode: GameMode
    duration_seconds: int
    completed_at: datetime

    @classmethod
    def create(
        cls,
        score: int,
        mode: GameMode,
        duration_seconds: float,
        completed_at: Optional[datetime] = None
    ) -> "RoundRecord":
        """
        Build a record with a fresh unique id.

        Args:
            score: Final score.
            mode: Mode the session was played in.
            duration_seconds: Session length. Truncated to whole seconds.
            completed_at: End time. Defaults to now (UTC).
        """
        if completed_at is None:
            completed_at = datetime.now(timezone.utc)
        return cls(
            id=uuid.uuid4().hex,
            score=int(score),
            mode=GameMode(mode),
            duration_seconds=max(0, int(duration_seconds)),
            completed_at=completed_at
        )

    def format_duration(self) -> str:
        """Duration as MM:SS."""
        minutes, seconds = divmod(self.duration_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible representation."""
        return {
            "id": self.id,
            "score": self.score,
            "mode": self.mode.value,
            "duration_seconds": self.duration_seconds,
            "completed_at": self.completed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundRecord":
        """
        Inverse of to_dict().

        Raises:
            ValueError: If a field is missing or malformed.
        """
        try:
            completed_at = datetime.fromisoformat(data["completed_at"])
            if completed_at.tzinfo is None:
                completed_at = completed_at.replace(tzinfo=timezone.utc)
            return cls(
                id=str(data["id"]),
                score=int(data["score"]),
                mode=GameMode(data["mode"]),
                duration_seconds=int(data["duration_seconds"]),
                completed_at=completed_at
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed record: {data!r}") from exc


class RecordStore:
    """
    Interface for record persistence.

    The session only ever calls save(); the rest is for record screens.
    """

    def save(self, record: RoundRecord) -> None:
        raise NotImplementedError

    def fetch_all(self) -> List[RoundRecord]:
        """All records, most recently completed first."""
        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        """Remove one record. Returns True if it existed."""
        raise NotImplementedError

    def clear_all(self) -> int:
        """Remove every record. Returns how many were removed."""
        raise NotImplementedError


def _newest_first(records: List[RoundRecord]) -> List[RoundRecord]:
    return sorted(records, key=lambda r: r.completed_at, reverse=True)


class MemoryRecordStore(RecordStore):
    """Keeps records in a list for the lifetime of the object."""

    def __init__(self):
        self._records: List[RoundRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def save(self, record: RoundRecord) -> None:
        self._records.append(record)

    def fetch_all(self) -> List[RoundRecord]:
        return _newest_first(self._records)

    def delete(self, record_id: str) -> bool:
        before = len(self._records)
        self._records = [r for r in self._records if r.id != record_id]
        return len(self._records) != before

    def clear_all(self) -> int:
        count = len(self._records)
        self._records = []
        return count


class JsonRecordStore(RecordStore):
    """
    Records stored as a JSON list in a single file.

    The file is read on every call and rewritten on every change, so several
    stores pointed at the same path see each other's writes.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize store.

        Args:
            path: JSON file. Created, with parent directories, on first save.
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> List[RoundRecord]:
        if not self._path.exists():
            return []
        with open(self._path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError(f"Record file is not a list: {self._path}")
        return [RoundRecord.from_dict(item) for item in raw]

    def _write(self, records: List[RoundRecord]) -> None:
        # Readers only ever see a complete file
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump([r.to_dict() for r in records], f, indent=2)
        os.replace(tmp_path, self._path)

    def save(self, record: RoundRecord) -> None:
        records = self._read()
        records.append(record)
        self._write(records)
        logger.info("Saved record %s (score %d) to %s", record.id, record.score, self._path)

    def fetch_all(self) -> List[RoundRecord]:
        return _newest_first(self._read())

    def delete(self, record_id: str) -> bool:
        records = self._read()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        self._write(remaining)
        return True

    def clear_all(self) -> int:
        """Empty the file. An unreadable file is replaced and counts as 0."""
        try:
            count = len(self._read())
        except ValueError:
            logger.warning("Discarding unreadable record file %s", self._path)
            count = 0
        self._write([])
        return count
