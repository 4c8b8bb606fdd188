"""
In-memory site diary store.

Stands in for the external diary service: records live for the lifetime of
the process and nothing is persisted. Reads return snapshots so callers can
never mutate the stored collection.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Iterable

from sitediary.diaries.models import DiaryRecord, DiaryRecordInput, Weather
from sitediary.observability.logging import get_logger

logger = get_logger(__name__)


class DuplicateDiaryError(ValueError):
    """Raised when a diary id is already taken."""


class DiaryRepository:
    """Thread-safe list of diaries in insertion order."""

    def __init__(self, diaries: Iterable[DiaryRecord] | None = None) -> None:
        self._lock = threading.Lock()
        self._diaries: list[DiaryRecord] = list(diaries or [])

    def list_all(self) -> list[DiaryRecord]:
        with self._lock:
            return list(self._diaries)

    def get(self, diary_id: str) -> DiaryRecord | None:
        with self._lock:
            return next((d for d in self._diaries if d.id == diary_id), None)

    def add(self, diary: DiaryRecordInput) -> DiaryRecord:
        record = DiaryRecord(
            id=diary.id or uuid.uuid4().hex,
            **diary.model_dump(exclude={"id"}),
        )
        with self._lock:
            if any(d.id == record.id for d in self._diaries):
                raise DuplicateDiaryError(f"Diary {record.id} already exists")
            self._diaries.append(record)
        logger.info("Created site diary %s dated %s", record.id, record.date)
        return record

    def update(self, diary_id: str, diary: DiaryRecordInput) -> DiaryRecord | None:
        """Replace a diary's fields, keeping its id. Returns None if not found."""
        record = DiaryRecord(id=diary_id, **diary.model_dump(exclude={"id"}))
        with self._lock:
            for index, existing in enumerate(self._diaries):
                if existing.id == diary_id:
                    self._diaries[index] = record
                    return record
        return None

    def delete(self, diary_id: str) -> bool:
        with self._lock:
            before = len(self._diaries)
            self._diaries = [d for d in self._diaries if d.id != diary_id]
            deleted = len(self._diaries) < before
        if deleted:
            logger.info("Deleted site diary %s", diary_id)
        return deleted

    def __len__(self) -> int:
        with self._lock:
            return len(self._diaries)


def seed_diaries() -> list[DiaryRecord]:
    """Sample diaries used when the service starts without an external store."""
    return [
        DiaryRecord(
            id="cm4lvx1rf00006fujdr7w5u9h",
            date="2024-12-13",
            weather=Weather(temperature=20, description="sunny"),
            created_by="John Doe",
            title="Test",
            content="Site diary entry to discuss the activities of the day",
            attendees=["Jane Smith", "John Doe"],
        ),
        DiaryRecord(
            id="cm4lvx1rf00007fujdr7w5u9i",
            date="2024-12-12",
            weather=Weather(temperature=18, description="cloudy"),
            created_by="Jane Smith",
            title="Progress Meeting",
            content="Detailed discussion on project milestones",
            attendees=["John Doe", "Mary Johnson"],
        ),
        DiaryRecord(
            id="cm4lvx1rf00008fujdr7w5u9j",
            date="2024-12-11",
            weather=Weather(temperature=22, description="partly cloudy"),
            created_by="Mary Johnson",
            title="Inspection Report",
            content="Inspection of the northern site completed",
            attendees=["Jane Smith", "Robert Brown"],
        ),
        DiaryRecord(
            id="cm4lvx1rf00009fujdr7w5u9k",
            date="2024-12-10",
            weather=Weather(temperature=15, description="rainy"),
            created_by="Robert Brown",
            title="Safety Inspection",
            content="Safety inspection conducted on scaffolding; minor issues logged",
            attendees=["Mary Johnson", "Sam Lee"],
        ),
        DiaryRecord(
            id="cm4lvx1rf0000afujdr7w5u9l",
            date="2024-12-09",
            weather=Weather(temperature=17, description="windy"),
            created_by="Sam Lee",
            title="Foundation Pour",
            content="Concrete pour for the east foundation completed",
            attendees=["John Doe", "Robert Brown"],
        ),
    ]
