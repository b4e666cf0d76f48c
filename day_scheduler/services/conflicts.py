"""Service for detecting scheduling conflicts between schedule entries."""

from __future__ import annotations

from datetime import date, datetime, time

from day_scheduler.domain.models import ScheduleEntry


def wall_clock(moment: datetime) -> datetime:
    """Strip tzinfo so stored values compare by their verbatim wall-clock time."""
    return moment.replace(tzinfo=None)


def day_window(day: date) -> tuple[datetime, datetime]:
    """Return the closed window from midnight to 23:59:59.999999 of *day*."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def range_window(start_day: date, end_day: date) -> tuple[datetime, datetime]:
    """Return the window from the start of *start_day* to the end of *end_day*."""
    return datetime.combine(start_day, time.min), datetime.combine(end_day, time.max)


def in_window(moment: datetime, window: tuple[datetime, datetime]) -> bool:
    low, high = window
    return low <= wall_clock(moment) <= high


def overlaps(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open overlap test for ``[a_start, a_end)`` and ``[b_start, b_end)``.

    Intervals that only touch at an endpoint do not overlap.
    """
    return wall_clock(a_start) < wall_clock(b_end) and wall_clock(a_end) > wall_clock(
        b_start
    )


def find_conflicts(
    new_start: datetime,
    new_end: datetime,
    existing_entries: list[ScheduleEntry],
    exclude_id: str | None = None,
) -> list[ScheduleEntry]:
    """Return existing entries that overlap with the given time range.

    Overlap rule: conflict if new_start < existing.end_time AND new_end > existing.start_time.
    The entry whose id equals *exclude_id* is skipped, so an update never
    conflicts with its own previous version. Results keep the input order.
    """
    return [
        entry
        for entry in existing_entries
        if (exclude_id is None or entry.id != exclude_id)
        and overlaps(new_start, new_end, entry.start_time, entry.end_time)
    ]
