"""Domain models for the day scheduler."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

TITLE_MAX_LENGTH = 255


class ErrorKind(StrEnum):
    INVALID_TITLE = "InvalidTitle"
    TITLE_TOO_LONG = "TitleTooLong"
    MISSING_START_TIME = "MissingStartTime"
    MISSING_END_TIME = "MissingEndTime"
    INVALID_INTERVAL = "InvalidInterval"
    MISSING_DATE = "MissingDate"
    SCHEDULE_CONFLICT = "ScheduleConflict"
    NOT_FOUND = "NotFound"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Document(BaseModel):
    """Base for JSON-facing models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Stored documents
# ---------------------------------------------------------------------------


class ScheduleEntry(_Document):
    id: str | None = None
    title: str
    description: str | None = None
    start_time: datetime
    end_time: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def _end_after_start(self) -> ScheduleEntry:
        # Compared as wall-clock values; stored times keep whatever tzinfo they came with.
        if self.end_time.replace(tzinfo=None) <= self.start_time.replace(tzinfo=None):
            raise ValueError("end_time must be after start_time")
        return self


class Goal(_Document):
    id: str | None = None
    title: str
    description: str | None = None
    date: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Todo(_Document):
    id: str | None = None
    title: str
    description: str | None = None
    completed: bool = False
    date: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Request DTOs
#
# Fields are optional here so that blank or missing values reach the
# validators and come back as named error kinds.
# ---------------------------------------------------------------------------


class ScheduleRequest(_Document):
    title: str | None = None
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None


class GoalRequest(_Document):
    title: str | None = None
    description: str | None = None
    date: datetime | None = None


class TodoRequest(_Document):
    title: str | None = None
    description: str | None = None
    completed: bool = False
    date: datetime | None = None


# ---------------------------------------------------------------------------
# Results and errors
# ---------------------------------------------------------------------------


class Failure(BaseModel):
    """Error half of a service result: what went wrong and, for conflicts, with what."""

    kind: ErrorKind
    message: str
    field: str | None = None
    conflicts: list[ScheduleEntry] = Field(default_factory=list)


class ErrorResponse(_Document):
    timestamp: datetime = Field(default_factory=_utcnow)
    status: int
    error: str
    message: str
    details: dict[str, Any] | None = None
