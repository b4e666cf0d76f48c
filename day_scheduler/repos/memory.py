"""In-memory document repositories for goals, todos and schedule entries."""

from __future__ import annotations

import threading
import uuid
from datetime import date, datetime, timedelta
from typing import Callable, Generic, TypeVar

from day_scheduler.domain.models import Goal, ScheduleEntry, Todo, _utcnow
from day_scheduler.services.conflicts import day_window, in_window, range_window

DocT = TypeVar("DocT", Goal, Todo, ScheduleEntry)


def _new_id() -> str:
    return str(uuid.uuid4())


class _DocumentRepository(Generic[DocT]):
    """Dict-backed store keyed by id.

    Subclasses name the timestamp that date queries filter on.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._store: dict[str, DocT] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def _date_of(self, doc: DocT) -> datetime:
        raise NotImplementedError

    def save(self, doc: DocT) -> DocT:
        now = self._clock()
        with self._lock:
            if doc.id is None or doc.id not in self._store:
                doc.id = doc.id or _new_id()
                doc.created_at = doc.created_at or now
            doc.updated_at = now
            self._store[doc.id] = doc
        return doc

    def find_by_id(self, doc_id: str) -> DocT | None:
        with self._lock:
            return self._store.get(doc_id)

    def exists_by_id(self, doc_id: str) -> bool:
        with self._lock:
            return doc_id in self._store

    def delete_by_id(self, doc_id: str) -> None:
        with self._lock:
            self._store.pop(doc_id, None)

    def find_all(self) -> list[DocT]:
        with self._lock:
            return list(self._store.values())

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def find_on_day(self, day: date) -> list[DocT]:
        window = day_window(day)
        return [d for d in self.find_all() if in_window(self._date_of(d), window)]

    def find_in_range(self, start_day: date, end_day: date) -> list[DocT]:
        window = range_window(start_day, end_day)
        return [d for d in self.find_all() if in_window(self._date_of(d), window)]

    def search_title(self, text: str) -> list[DocT]:
        needle = text.lower()
        return [d for d in self.find_all() if needle in d.title.lower()]

    def created_since(self, cutoff: datetime) -> list[DocT]:
        return [
            d
            for d in self.find_all()
            if d.created_at is not None and d.created_at >= cutoff
        ]


class ScheduleRepository(_DocumentRepository[ScheduleEntry]):
    """Schedule entries, filtered by start time."""

    def _date_of(self, doc: ScheduleEntry) -> datetime:
        return doc.start_time

    def find_entries_on_day(self, day: date) -> list[ScheduleEntry]:
        return self.find_on_day(day)


class GoalRepository(_DocumentRepository[Goal]):
    def _date_of(self, doc: Goal) -> datetime:
        return doc.date


class TodoRepository(_DocumentRepository[Todo]):
    def _date_of(self, doc: Todo) -> datetime:
        return doc.date

    def find_by_completed(self, completed: bool) -> list[Todo]:
        return [t for t in self.find_all() if t.completed is completed]

    def count_by_completed(self, completed: bool) -> int:
        return len(self.find_by_completed(completed))


# ---------------------------------------------------------------------------
# Seed data – a small day of back-to-back entries useful for conflict testing
# ---------------------------------------------------------------------------


def _seed_schedules(repo: ScheduleRepository) -> None:
    today = datetime.combine(date.today(), datetime.min.time())
    tomorrow = today + timedelta(days=1)

    repo.save(
        ScheduleEntry(
            title="Standup",
            description="Daily team sync",
            start_time=tomorrow + timedelta(hours=9),
            end_time=tomorrow + timedelta(hours=9, minutes=30),
        )
    )
    # Touches the standup's end, which is allowed.
    repo.save(
        ScheduleEntry(
            title="Focus block",
            start_time=tomorrow + timedelta(hours=9, minutes=30),
            end_time=tomorrow + timedelta(hours=11, minutes=30),
        )
    )
    repo.save(
        ScheduleEntry(
            title="Lunch",
            start_time=tomorrow + timedelta(hours=12),
            end_time=tomorrow + timedelta(hours=13),
        )
    )


def create_schedule_repository(seed: bool = False) -> ScheduleRepository:
    """Return a ScheduleRepository, optionally pre-loaded with sample data."""
    repo = ScheduleRepository()
    if seed:
        _seed_schedules(repo)
    return repo
