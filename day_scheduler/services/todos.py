"""Todo operations, including completion tracking."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable

from day_scheduler.domain.models import ErrorKind, Failure, Todo, TodoRequest, _utcnow
from day_scheduler.domain.store import TodoStore
from day_scheduler.services.validation import validate_dated_item

logger = logging.getLogger(__name__)


def _not_found(todo_id: str) -> Failure:
    return Failure(
        kind=ErrorKind.NOT_FOUND,
        message=f"Todo not found with ID: {todo_id}",
        field="id",
    )


class TodoService:
    def __init__(self, store: TodoStore, clock: Callable[[], datetime] = _utcnow) -> None:
        self.store = store
        self._clock = clock

    def create_todo(self, request: TodoRequest) -> Todo | Failure:
        logger.info("Creating new todo: %s", request.title)
        failure = validate_dated_item(request.title, request.date, "Todo")
        if failure is not None:
            logger.warning("Rejected todo %r: %s", request.title, failure.message)
            return failure
        saved = self.store.save(
            Todo(
                title=request.title,
                description=request.description,
                completed=request.completed,
                date=request.date,
            )
        )
        logger.info("Todo created successfully with ID: %s", saved.id)
        return saved

    def update_todo(self, todo_id: str, request: TodoRequest) -> Todo | Failure:
        logger.info("Updating todo with ID: %s", todo_id)
        existing = self.store.find_by_id(todo_id)
        if existing is None:
            logger.warning("Todo not found with ID: %s", todo_id)
            return _not_found(todo_id)
        failure = validate_dated_item(request.title, request.date, "Todo")
        if failure is not None:
            logger.warning("Rejected update of %s: %s", todo_id, failure.message)
            return failure
        updated = self.store.save(
            Todo(
                id=todo_id,
                title=request.title,
                description=request.description,
                completed=request.completed,
                date=request.date,
                created_at=existing.created_at,
            )
        )
        logger.info("Todo updated successfully with ID: %s", updated.id)
        return updated

    def delete_todo(self, todo_id: str) -> Failure | None:
        logger.info("Deleting todo with ID: %s", todo_id)
        if not self.store.exists_by_id(todo_id):
            logger.warning("Todo not found with ID: %s", todo_id)
            return _not_found(todo_id)
        self.store.delete_by_id(todo_id)
        logger.info("Todo deleted successfully with ID: %s", todo_id)
        return None

    def set_completed(self, todo_id: str, completed: bool) -> Todo | Failure:
        """Flip the completion flag without touching any other field."""
        logger.info("Marking todo %s as %s", todo_id, "completed" if completed else "incomplete")
        todo = self.store.find_by_id(todo_id)
        if todo is None:
            logger.warning("Todo not found with ID: %s", todo_id)
            return _not_found(todo_id)
        todo.completed = completed
        return self.store.save(todo)

    def get_todo(self, todo_id: str) -> Todo | None:
        logger.info("Fetching todo by ID: %s", todo_id)
        return self.store.find_by_id(todo_id)

    def list_todos(self) -> list[Todo]:
        logger.info("Fetching all todos")
        return self.store.find_all()

    def todos_by_status(self, completed: bool) -> list[Todo]:
        logger.info("Fetching todos by completion status: %s", completed)
        return self.store.find_by_completed(completed)

    def count_by_status(self, completed: bool) -> int:
        logger.info("Counting todos by completion status: %s", completed)
        return self.store.count_by_completed(completed)

    def todos_on(self, day: date) -> list[Todo]:
        logger.info("Fetching todos for date: %s", day)
        return self.store.find_on_day(day)

    def todos_between(self, start_day: date, end_day: date) -> list[Todo]:
        logger.info("Fetching todos by date range: %s to %s", start_day, end_day)
        return self.store.find_in_range(start_day, end_day)

    def search_todos(self, title: str) -> list[Todo]:
        logger.info("Searching todos by title: %s", title)
        return self.store.search_title(title)

    def recent_todos(self, days: int) -> list[Todo]:
        logger.info("Fetching todos created in last %d days", days)
        return self.store.created_since(self._clock() - timedelta(days=days))
