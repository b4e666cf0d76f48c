"""Goal operations."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable

from day_scheduler.domain.models import ErrorKind, Failure, Goal, GoalRequest, _utcnow
from day_scheduler.domain.store import GoalStore
from day_scheduler.services.validation import validate_dated_item

logger = logging.getLogger(__name__)


def _not_found(goal_id: str) -> Failure:
    return Failure(
        kind=ErrorKind.NOT_FOUND,
        message=f"Goal not found with ID: {goal_id}",
        field="id",
    )


class GoalService:
    def __init__(self, store: GoalStore, clock: Callable[[], datetime] = _utcnow) -> None:
        self.store = store
        self._clock = clock

    def create_goal(self, request: GoalRequest) -> Goal | Failure:
        logger.info("Creating new goal: %s", request.title)
        failure = validate_dated_item(request.title, request.date, "Goal")
        if failure is not None:
            logger.warning("Rejected goal %r: %s", request.title, failure.message)
            return failure
        saved = self.store.save(
            Goal(title=request.title, description=request.description, date=request.date)
        )
        logger.info("Goal created successfully with ID: %s", saved.id)
        return saved

    def update_goal(self, goal_id: str, request: GoalRequest) -> Goal | Failure:
        logger.info("Updating goal with ID: %s", goal_id)
        existing = self.store.find_by_id(goal_id)
        if existing is None:
            logger.warning("Goal not found with ID: %s", goal_id)
            return _not_found(goal_id)
        failure = validate_dated_item(request.title, request.date, "Goal")
        if failure is not None:
            logger.warning("Rejected update of %s: %s", goal_id, failure.message)
            return failure
        updated = self.store.save(
            Goal(
                id=goal_id,
                title=request.title,
                description=request.description,
                date=request.date,
                created_at=existing.created_at,
            )
        )
        logger.info("Goal updated successfully with ID: %s", updated.id)
        return updated

    def delete_goal(self, goal_id: str) -> Failure | None:
        logger.info("Deleting goal with ID: %s", goal_id)
        if not self.store.exists_by_id(goal_id):
            logger.warning("Goal not found with ID: %s", goal_id)
            return _not_found(goal_id)
        self.store.delete_by_id(goal_id)
        logger.info("Goal deleted successfully with ID: %s", goal_id)
        return None

    def get_goal(self, goal_id: str) -> Goal | None:
        logger.info("Fetching goal by ID: %s", goal_id)
        return self.store.find_by_id(goal_id)

    def list_goals(self) -> list[Goal]:
        logger.info("Fetching all goals")
        return self.store.find_all()

    def goals_on(self, day: date) -> list[Goal]:
        logger.info("Fetching goals for date: %s", day)
        return self.store.find_on_day(day)

    def goals_between(self, start_day: date, end_day: date) -> list[Goal]:
        logger.info("Fetching goals by date range: %s to %s", start_day, end_day)
        return self.store.find_in_range(start_day, end_day)

    def search_goals(self, title: str) -> list[Goal]:
        logger.info("Searching goals by title: %s", title)
        return self.store.search_title(title)

    def recent_goals(self, days: int) -> list[Goal]:
        logger.info("Fetching goals created in last %d days", days)
        return self.store.created_since(self._clock() - timedelta(days=days))
