"""Schedule operations: validated, conflict-checked writes and list queries."""

from __future__ import annotations

import logging
import threading
from contextlib import ExitStack, contextmanager
from datetime import date, datetime, timedelta
from typing import Callable, Iterator

from day_scheduler.domain.models import (
    ErrorKind,
    Failure,
    ScheduleEntry,
    ScheduleRequest,
    _utcnow,
)
from day_scheduler.domain.store import ScheduleStore
from day_scheduler.services.validation import check_conflicts, validate_fields

logger = logging.getLogger(__name__)


class DayLocks:
    """One lock per calendar day.

    Held across the read-check-write sequence so two writers on the same day
    cannot both pass the conflict check. A day's lock is dropped once no
    writer holds or waits on it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # day -> [lock, number of writers holding or waiting]
        self._locks: dict[date, list] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def _day(self, day: date) -> Iterator[None]:
        with self._guard:
            slot = self._locks.setdefault(day, [threading.Lock(), 0])
            slot[1] += 1
        try:
            with slot[0]:
                yield
        finally:
            with self._guard:
                slot[1] -= 1
                if slot[1] == 0:
                    del self._locks[day]

    @contextmanager
    def hold(self, *days: date) -> Iterator[None]:
        # Sorted acquisition keeps two-day updates deadlock free.
        with ExitStack() as stack:
            for day in sorted(set(days)):
                stack.enter_context(self._day(day))
            yield


def _not_found(schedule_id: str) -> Failure:
    return Failure(
        kind=ErrorKind.NOT_FOUND,
        message=f"Schedule not found with ID: {schedule_id}",
        field="id",
    )


class ScheduleService:
    """Composes validation, conflict detection and persistence for schedules."""

    def __init__(
        self,
        store: ScheduleStore,
        locks: DayLocks | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.locks = locks or DayLocks()
        self._clock = clock

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_schedule(self, request: ScheduleRequest) -> ScheduleEntry | Failure:
        logger.info("Creating new schedule: %s", request.title)
        failure = validate_fields(request)
        if failure is not None:
            logger.warning("Rejected schedule %r: %s", request.title, failure.message)
            return failure

        day = request.start_time.date()
        with self.locks.hold(day):
            failure = check_conflicts(request, self.store.find_entries_on_day(day))
            if failure is not None:
                logger.warning("Rejected schedule %r: %s", request.title, failure.message)
                return failure
            saved = self.store.save(
                ScheduleEntry(
                    title=request.title,
                    description=request.description,
                    start_time=request.start_time,
                    end_time=request.end_time,
                )
            )

        logger.info("Schedule created successfully with ID: %s", saved.id)
        return saved

    def update_schedule(
        self, schedule_id: str, request: ScheduleRequest
    ) -> ScheduleEntry | Failure:
        logger.info("Updating schedule with ID: %s", schedule_id)
        existing = self.store.find_by_id(schedule_id)
        if existing is None:
            logger.warning("Schedule not found with ID: %s", schedule_id)
            return _not_found(schedule_id)

        failure = validate_fields(request)
        if failure is not None:
            logger.warning("Rejected update of %s: %s", schedule_id, failure.message)
            return failure

        day = request.start_time.date()
        while True:
            existing = self.store.find_by_id(schedule_id)
            if existing is None:
                logger.warning("Schedule not found with ID: %s", schedule_id)
                return _not_found(schedule_id)
            with self.locks.hold(day, existing.start_time.date()):
                current = self.store.find_by_id(schedule_id)
                if current is None:
                    logger.warning("Schedule not found with ID: %s", schedule_id)
                    return _not_found(schedule_id)
                # Another writer moved the entry off the day we locked; retry.
                if current.start_time.date() != existing.start_time.date():
                    continue
                failure = check_conflicts(
                    request, self.store.find_entries_on_day(day), exclude_id=schedule_id
                )
                if failure is not None:
                    logger.warning("Rejected update of %s: %s", schedule_id, failure.message)
                    return failure
                updated = self.store.save(
                    ScheduleEntry(
                        id=schedule_id,
                        title=request.title,
                        description=request.description,
                        start_time=request.start_time,
                        end_time=request.end_time,
                        created_at=current.created_at,
                    )
                )
            logger.info("Schedule updated successfully with ID: %s", updated.id)
            return updated

    def delete_schedule(self, schedule_id: str) -> Failure | None:
        logger.info("Deleting schedule with ID: %s", schedule_id)
        while True:
            existing = self.store.find_by_id(schedule_id)
            if existing is None:
                logger.warning("Schedule not found with ID: %s", schedule_id)
                return _not_found(schedule_id)
            day = existing.start_time.date()
            with self.locks.hold(day):
                current = self.store.find_by_id(schedule_id)
                # An update may have moved the entry to another day meanwhile.
                if current is not None and current.start_time.date() != day:
                    continue
                if current is None:
                    logger.warning("Schedule not found with ID: %s", schedule_id)
                    return _not_found(schedule_id)
                self.store.delete_by_id(schedule_id)
            logger.info("Schedule deleted successfully with ID: %s", schedule_id)
            return None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_schedule(self, schedule_id: str) -> ScheduleEntry | None:
        logger.info("Fetching schedule by ID: %s", schedule_id)
        return self.store.find_by_id(schedule_id)

    def list_schedules(self) -> list[ScheduleEntry]:
        logger.info("Fetching all schedules")
        return self.store.find_all()

    def schedules_on(self, day: date) -> list[ScheduleEntry]:
        logger.info("Fetching schedules for date: %s", day)
        return self.store.find_entries_on_day(day)

    def schedules_between(self, start_day: date, end_day: date) -> list[ScheduleEntry]:
        logger.info("Fetching schedules by date range: %s to %s", start_day, end_day)
        return self.store.find_in_range(start_day, end_day)

    def search_schedules(self, title: str) -> list[ScheduleEntry]:
        logger.info("Searching schedules by title: %s", title)
        return self.store.search_title(title)

    def recent_schedules(self, days: int) -> list[ScheduleEntry]:
        logger.info("Fetching schedules created in last %d days", days)
        return self.store.created_since(self._clock() - timedelta(days=days))
