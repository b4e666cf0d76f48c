"""Storage interfaces the services are written against.

Implementations can be in-memory (see ``day_scheduler.repos.memory``) or
backed by a real document database.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol

from day_scheduler.domain.models import Goal, ScheduleEntry, Todo


class ScheduleStore(Protocol):
    """Persistence operations for schedule entries."""

    def find_entries_on_day(self, day: date) -> list[ScheduleEntry]:
        """Return every entry whose start time falls on *day*."""
        ...

    def save(self, entry: ScheduleEntry) -> ScheduleEntry:
        """Insert or replace *entry*.

        Assigns ``id`` and ``created_at`` on insert and always refreshes
        ``updated_at``.
        """
        ...

    def find_by_id(self, entry_id: str) -> ScheduleEntry | None: ...

    def exists_by_id(self, entry_id: str) -> bool: ...

    def delete_by_id(self, entry_id: str) -> None: ...

    def find_all(self) -> list[ScheduleEntry]: ...

    def find_in_range(self, start_day: date, end_day: date) -> list[ScheduleEntry]: ...

    def search_title(self, text: str) -> list[ScheduleEntry]: ...

    def created_since(self, cutoff: datetime) -> list[ScheduleEntry]: ...


class GoalStore(Protocol):
    def save(self, goal: Goal) -> Goal: ...

    def find_by_id(self, goal_id: str) -> Goal | None: ...

    def exists_by_id(self, goal_id: str) -> bool: ...

    def delete_by_id(self, goal_id: str) -> None: ...

    def find_all(self) -> list[Goal]: ...

    def find_on_day(self, day: date) -> list[Goal]: ...

    def find_in_range(self, start_day: date, end_day: date) -> list[Goal]: ...

    def search_title(self, text: str) -> list[Goal]: ...

    def created_since(self, cutoff: datetime) -> list[Goal]: ...


class TodoStore(Protocol):
    def save(self, todo: Todo) -> Todo: ...

    def find_by_id(self, todo_id: str) -> Todo | None: ...

    def exists_by_id(self, todo_id: str) -> bool: ...

    def delete_by_id(self, todo_id: str) -> None: ...

    def find_all(self) -> list[Todo]: ...

    def find_on_day(self, day: date) -> list[Todo]: ...

    def find_in_range(self, start_day: date, end_day: date) -> list[Todo]: ...

    def search_title(self, text: str) -> list[Todo]: ...

    def created_since(self, cutoff: datetime) -> list[Todo]: ...

    def find_by_completed(self, completed: bool) -> list[Todo]: ...

    def count_by_completed(self, completed: bool) -> int: ...
