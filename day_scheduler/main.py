"""FastAPI application — entry point for the day scheduler service."""

from __future__ import annotations

import logging
from datetime import date
from typing import TypeVar

from fastapi import FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from day_scheduler.config import AppConfig, configure_logging
from day_scheduler.domain.models import (
    ErrorKind,
    ErrorResponse,
    Failure,
    Goal,
    GoalRequest,
    ScheduleEntry,
    ScheduleRequest,
    Todo,
    TodoRequest,
)
from day_scheduler.repos.memory import (
    GoalRepository,
    TodoRepository,
    create_schedule_repository,
)
from day_scheduler.services.goals import GoalService
from day_scheduler.services.schedules import ScheduleService
from day_scheduler.services.todos import TodoService

logger = logging.getLogger(__name__)

config = AppConfig()
configure_logging(config.log_level)

app = FastAPI(title="Day Scheduler")
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Singletons (created at import time for simplicity) ────────────────
schedule_repo = create_schedule_repository(seed=config.seed_data)
goal_repo = GoalRepository()
todo_repo = TodoRepository()

schedule_service = ScheduleService(schedule_repo)
goal_service = GoalService(goal_repo)
todo_service = TodoService(todo_repo)


# ── Error handling ────────────────────────────────────────────────────

T = TypeVar("T")


class FailureError(Exception):
    """Carries a service Failure out of a route to the error handler."""

    def __init__(self, failure: Failure) -> None:
        super().__init__(failure.message)
        self.failure = failure


def _unwrap(result: T | Failure) -> T:
    if isinstance(result, Failure):
        raise FailureError(result)
    return result


def _error_response(
    status: int, error: str, message: str, details: dict | None = None
) -> JSONResponse:
    body = ErrorResponse(status=status, error=error, message=message, details=details)
    return JSONResponse(
        status_code=status, content=body.model_dump(mode="json", by_alias=True)
    )


def _not_found(kind: str, item_id: str) -> FailureError:
    return FailureError(
        Failure(
            kind=ErrorKind.NOT_FOUND,
            message=f"{kind} not found with ID: {item_id}",
            field="id",
        )
    )


@app.exception_handler(FailureError)
async def handle_failure(request: Request, exc: FailureError) -> JSONResponse:
    failure = exc.failure
    status = 404 if failure.kind == ErrorKind.NOT_FOUND else 400
    details: dict = {}
    if failure.field:
        details[failure.field] = failure.message
    if failure.conflicts:
        details["conflicts"] = [entry.id for entry in failure.conflicts]
    logger.error("%s %s failed: %s", request.method, request.url.path, failure.message)
    return _error_response(status, failure.kind.value, failure.message, details or None)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0])
        details[field] = error["msg"]
    logger.error("Validation error on %s %s: %s", request.method, request.url.path, details)
    return _error_response(400, "Validation Error", "Invalid input data", details)


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return _error_response(500, "Internal Server Error", "An unexpected error occurred")


# Larger look-backs fall outside the datetime range.
MAX_RECENT_DAYS = 36500


def _days(days: int | None) -> int:
    return config.recent_days if days is None else days


# ── Schedules ─────────────────────────────────────────────────────────


@app.post("/api/schedules", response_model=ScheduleEntry, status_code=201)
def create_schedule(body: ScheduleRequest) -> ScheduleEntry:
    """Create a schedule entry unless it overlaps another entry that day."""
    return _unwrap(schedule_service.create_schedule(body))


@app.get("/api/schedules", response_model=list[ScheduleEntry])
def list_schedules() -> list[ScheduleEntry]:
    return schedule_service.list_schedules()


@app.get("/api/schedules/date/{day}", response_model=list[ScheduleEntry])
def schedules_on(day: date) -> list[ScheduleEntry]:
    """Return entries starting on *day* (``YYYY-MM-DD``)."""
    return schedule_service.schedules_on(day)


@app.get("/api/schedules/daterange", response_model=list[ScheduleEntry])
def schedules_between(
    start_date: date = Query(alias="startDate"),
    end_date: date = Query(alias="endDate"),
) -> list[ScheduleEntry]:
    return schedule_service.schedules_between(start_date, end_date)


@app.get("/api/schedules/search", response_model=list[ScheduleEntry])
def search_schedules(title: str) -> list[ScheduleEntry]:
    return schedule_service.search_schedules(title)


@app.get("/api/schedules/recent", response_model=list[ScheduleEntry])
def recent_schedules(days: int | None = Query(default=None, ge=0, le=MAX_RECENT_DAYS)) -> list[ScheduleEntry]:
    return schedule_service.recent_schedules(_days(days))


@app.get("/api/schedules/{schedule_id}", response_model=ScheduleEntry)
def get_schedule(schedule_id: str) -> ScheduleEntry:
    entry = schedule_service.get_schedule(schedule_id)
    if entry is None:
        raise _not_found("Schedule", schedule_id)
    return entry


@app.put("/api/schedules/{schedule_id}", response_model=ScheduleEntry)
def update_schedule(schedule_id: str, body: ScheduleRequest) -> ScheduleEntry:
    """Replace an entry's fields; the entry is never compared with itself."""
    return _unwrap(schedule_service.update_schedule(schedule_id, body))


@app.delete("/api/schedules/{schedule_id}", status_code=204)
def delete_schedule(schedule_id: str) -> Response:
    failure = schedule_service.delete_schedule(schedule_id)
    if failure is not None:
        raise FailureError(failure)
    return Response(status_code=204)


# ── Goals ─────────────────────────────────────────────────────────────


@app.post("/api/goals", response_model=Goal, status_code=201)
def create_goal(body: GoalRequest) -> Goal:
    return _unwrap(goal_service.create_goal(body))


@app.get("/api/goals", response_model=list[Goal])
def list_goals() -> list[Goal]:
    return goal_service.list_goals()


@app.get("/api/goals/date/{day}", response_model=list[Goal])
def goals_on(day: date) -> list[Goal]:
    return goal_service.goals_on(day)


@app.get("/api/goals/daterange", response_model=list[Goal])
def goals_between(
    start_date: date = Query(alias="startDate"),
    end_date: date = Query(alias="endDate"),
) -> list[Goal]:
    return goal_service.goals_between(start_date, end_date)


@app.get("/api/goals/search", response_model=list[Goal])
def search_goals(title: str) -> list[Goal]:
    return goal_service.search_goals(title)


@app.get("/api/goals/recent", response_model=list[Goal])
def recent_goals(days: int | None = Query(default=None, ge=0, le=MAX_RECENT_DAYS)) -> list[Goal]:
    return goal_service.recent_goals(_days(days))


@app.get("/api/goals/{goal_id}", response_model=Goal)
def get_goal(goal_id: str) -> Goal:
    goal = goal_service.get_goal(goal_id)
    if goal is None:
        raise _not_found("Goal", goal_id)
    return goal


@app.put("/api/goals/{goal_id}", response_model=Goal)
def update_goal(goal_id: str, body: GoalRequest) -> Goal:
    return _unwrap(goal_service.update_goal(goal_id, body))


@app.delete("/api/goals/{goal_id}", status_code=204)
def delete_goal(goal_id: str) -> Response:
    failure = goal_service.delete_goal(goal_id)
    if failure is not None:
        raise FailureError(failure)
    return Response(status_code=204)


# ── Todos ─────────────────────────────────────────────────────────────


@app.post("/api/todos", response_model=Todo, status_code=201)
def create_todo(body: TodoRequest) -> Todo:
    return _unwrap(todo_service.create_todo(body))


@app.get("/api/todos", response_model=list[Todo])
def list_todos() -> list[Todo]:
    return todo_service.list_todos()


@app.get("/api/todos/status/{is_completed}", response_model=list[Todo])
def todos_by_status(is_completed: bool) -> list[Todo]:
    return todo_service.todos_by_status(is_completed)


@app.get("/api/todos/count")
def count_todos(is_completed: bool = Query(alias="isCompleted")) -> int:
    return todo_service.count_by_status(is_completed)


@app.get("/api/todos/date/{day}", response_model=list[Todo])
def todos_on(day: date) -> list[Todo]:
    return todo_service.todos_on(day)


@app.get("/api/todos/daterange", response_model=list[Todo])
def todos_between(
    start_date: date = Query(alias="startDate"),
    end_date: date = Query(alias="endDate"),
) -> list[Todo]:
    return todo_service.todos_between(start_date, end_date)


@app.get("/api/todos/search", response_model=list[Todo])
def search_todos(title: str) -> list[Todo]:
    return todo_service.search_todos(title)


@app.get("/api/todos/recent", response_model=list[Todo])
def recent_todos(days: int | None = Query(default=None, ge=0, le=MAX_RECENT_DAYS)) -> list[Todo]:
    return todo_service.recent_todos(_days(days))


@app.get("/api/todos/{todo_id}", response_model=Todo)
def get_todo(todo_id: str) -> Todo:
    todo = todo_service.get_todo(todo_id)
    if todo is None:
        raise _not_found("Todo", todo_id)
    return todo


@app.put("/api/todos/{todo_id}", response_model=Todo)
def update_todo(todo_id: str, body: TodoRequest) -> Todo:
    return _unwrap(todo_service.update_todo(todo_id, body))


@app.patch("/api/todos/{todo_id}/complete", response_model=Todo)
def complete_todo(todo_id: str) -> Todo:
    return _unwrap(todo_service.set_completed(todo_id, True))


@app.patch("/api/todos/{todo_id}/incomplete", response_model=Todo)
def reopen_todo(todo_id: str) -> Todo:
    return _unwrap(todo_service.set_completed(todo_id, False))


@app.delete("/api/todos/{todo_id}", status_code=204)
def delete_todo(todo_id: str) -> Response:
    failure = todo_service.delete_todo(todo_id)
    if failure is not None:
        raise FailureError(failure)
    return Response(status_code=204)
