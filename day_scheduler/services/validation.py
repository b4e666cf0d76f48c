"""Field validation and conflict checks for candidate writes.

Everything here is a pure function of its arguments: callers fetch the
existing entries themselves and pass them in. Each check returns ``None``
when the candidate is acceptable, or a :class:`Failure` describing the first
problem found.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from day_scheduler.domain.models import (
    TITLE_MAX_LENGTH,
    ErrorKind,
    Failure,
    ScheduleEntry,
)
from day_scheduler.services.conflicts import find_conflicts, wall_clock


class Interval(Protocol):
    start_time: datetime | None
    end_time: datetime | None


class Titled(Interval, Protocol):
    title: str | None


def validate_title(title: str | None, label: str = "Schedule") -> Failure | None:
    if title is None or not title.strip():
        return Failure(
            kind=ErrorKind.INVALID_TITLE,
            message=f"{label} title cannot be null or empty",
            field="title",
        )
    if len(title) > TITLE_MAX_LENGTH:
        return Failure(
            kind=ErrorKind.TITLE_TOO_LONG,
            message=f"{label} title cannot exceed {TITLE_MAX_LENGTH} characters",
            field="title",
        )
    return None


def validate_fields(entry: Titled) -> Failure | None:
    """Check a schedule candidate's fields, failing fast on the first violation.

    Order: title present, title length, start present, end present,
    start strictly before end.
    """
    failure = validate_title(entry.title)
    if failure is not None:
        return failure
    if entry.start_time is None:
        return Failure(
            kind=ErrorKind.MISSING_START_TIME,
            message="Start time cannot be null",
            field="startTime",
        )
    if entry.end_time is None:
        return Failure(
            kind=ErrorKind.MISSING_END_TIME,
            message="End time cannot be null",
            field="endTime",
        )
    if wall_clock(entry.start_time) >= wall_clock(entry.end_time):
        return Failure(
            kind=ErrorKind.INVALID_INTERVAL,
            message="Start time must be before end time",
            field="endTime",
        )
    return None


def check_conflicts(
    candidate: Interval,
    existing_same_day_entries: list[ScheduleEntry],
    exclude_id: str | None = None,
) -> Failure | None:
    """Reject *candidate* if it overlaps any of the supplied entries.

    All overlapping entries are reported in ``Failure.conflicts``; the message
    names the first one in input order.
    """
    conflicts = find_conflicts(
        candidate.start_time,
        candidate.end_time,
        existing_same_day_entries,
        exclude_id=exclude_id,
    )
    if not conflicts:
        return None
    first = conflicts[0]
    return Failure(
        kind=ErrorKind.SCHEDULE_CONFLICT,
        message=(
            f"Time conflict detected with existing schedule: {first.title} ({first.id})"
        ),
        field="startTime",
        conflicts=conflicts,
    )


def validate_dated_item(
    title: str | None, when: datetime | None, label: str
) -> Failure | None:
    """Validation shared by goals and todos: a usable title and a date."""
    failure = validate_title(title, label)
    if failure is not None:
        return failure
    if when is None:
        return Failure(
            kind=ErrorKind.MISSING_DATE,
            message=f"{label} date cannot be null",
            field="date",
        )
    return None
