"""Tests for the composed schedule operations."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta

import pytest

from day_scheduler.domain.models import ErrorKind, Failure, ScheduleEntry, ScheduleRequest
from day_scheduler.repos.memory import ScheduleRepository
from day_scheduler.services.schedules import DayLocks, ScheduleService


def _at(hour: int, minute: int = 0, day: int = 15) -> datetime:
    return datetime(2024, 1, day, hour, minute)


def _request(title: str, start: datetime, end: datetime) -> ScheduleRequest:
    return ScheduleRequest(title=title, start_time=start, end_time=end)


@pytest.fixture()
def service() -> ScheduleService:
    return ScheduleService(ScheduleRepository())


def test_create_persists_entry(service):
    created = service.create_schedule(_request("Standup", _at(9), _at(9, 30)))

    assert isinstance(created, ScheduleEntry)
    assert created.id is not None
    assert service.get_schedule(created.id) is created


def test_standup_scenario(service):
    standup = service.create_schedule(_request("Standup", _at(9), _at(9, 30)))
    assert isinstance(standup, ScheduleEntry)

    one_on_one = service.create_schedule(_request("1:1", _at(9, 15), _at(9, 45)))
    assert isinstance(one_on_one, Failure)
    assert one_on_one.kind == ErrorKind.SCHEDULE_CONFLICT
    assert "Standup" in one_on_one.message

    lunch = service.create_schedule(_request("Lunch", _at(9, 30), _at(10, 30)))
    assert isinstance(lunch, ScheduleEntry)

    assert {e.title for e in service.list_schedules()} == {"Standup", "Lunch"}


def test_rejected_create_leaves_store_untouched(service):
    service.create_schedule(_request("A", _at(10), _at(11)))

    service.create_schedule(_request("B", _at(10, 30), _at(11, 30)))
    service.create_schedule(_request("", _at(14), _at(15)))

    assert [e.title for e in service.list_schedules()] == ["A"]


def test_entries_on_different_days_never_conflict(service):
    late = service.create_schedule(_request("Late", _at(23, 0, day=15), _at(23, 59, day=15)))
    early = service.create_schedule(_request("Early", _at(0, 0, day=16), _at(1, 0, day=16)))
    same_clock = service.create_schedule(_request("Same clock", _at(23, 0, day=16), _at(23, 30, day=16)))

    assert isinstance(late, ScheduleEntry)
    assert isinstance(early, ScheduleEntry)
    assert isinstance(same_clock, ScheduleEntry)


def test_update_excludes_itself(service):
    entry = service.create_schedule(_request("A", _at(10), _at(11)))

    updated = service.update_schedule(entry.id, _request("A", _at(10, 15), _at(11, 15)))

    assert isinstance(updated, ScheduleEntry)
    assert updated.id == entry.id
    assert updated.start_time == _at(10, 15)
    assert updated.created_at == entry.created_at


def test_update_conflicting_with_other_entry_is_rejected(service):
    a = service.create_schedule(_request("A", _at(10), _at(11)))
    service.create_schedule(_request("B", _at(11), _at(12)))

    result = service.update_schedule(a.id, _request("A", _at(10, 30), _at(11, 30)))

    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.SCHEDULE_CONFLICT
    assert "B" in result.message
    assert service.get_schedule(a.id).start_time == _at(10)


def test_update_can_move_entry_to_another_day(service):
    entry = service.create_schedule(_request("Move me", _at(10), _at(11)))

    moved = service.update_schedule(entry.id, _request("Move me", _at(10, day=17), _at(11, day=17)))

    assert isinstance(moved, ScheduleEntry)
    assert service.schedules_on(_at(0).date()) == []
    assert [e.id for e in service.schedules_on(_at(0, day=17).date())] == [entry.id]


def test_update_unknown_id_is_not_found(service):
    result = service.update_schedule("missing", _request("A", _at(10), _at(11)))
    assert result.kind == ErrorKind.NOT_FOUND


def test_update_validates_fields(service):
    entry = service.create_schedule(_request("A", _at(10), _at(11)))
    result = service.update_schedule(entry.id, _request("A", _at(11), _at(10)))
    assert result.kind == ErrorKind.INVALID_INTERVAL


def test_delete(service):
    entry = service.create_schedule(_request("A", _at(10), _at(11)))

    assert service.delete_schedule(entry.id) is None
    assert service.get_schedule(entry.id) is None
    assert service.delete_schedule(entry.id).kind == ErrorKind.NOT_FOUND


def test_deleted_slot_can_be_reused(service):
    entry = service.create_schedule(_request("A", _at(10), _at(11)))
    service.delete_schedule(entry.id)

    assert isinstance(service.create_schedule(_request("B", _at(10), _at(11))), ScheduleEntry)


def test_queries(service):
    service.create_schedule(_request("Morning run", _at(7), _at(8)))
    service.create_schedule(_request("Team RUN-through", _at(7, day=16), _at(8, day=16)))
    service.create_schedule(_request("Dinner", _at(19, day=20), _at(20, day=20)))

    assert [e.title for e in service.schedules_on(_at(0).date())] == ["Morning run"]
    assert len(service.schedules_between(_at(0).date(), _at(0, day=16).date())) == 2
    assert len(service.search_schedules("run")) == 2
    assert len(service.recent_schedules(7)) == 3


def test_recent_uses_clock():
    now = datetime(2024, 2, 1, 12, 0)
    repo = ScheduleRepository(clock=lambda: now)
    old = ScheduleEntry(
        title="Old",
        start_time=_at(9),
        end_time=_at(10),
        created_at=now - timedelta(days=10),
    )
    repo.save(old)
    service = ScheduleService(repo, clock=lambda: now)
    service.create_schedule(_request("New", _at(11), _at(12)))

    assert [e.title for e in service.recent_schedules(7)] == ["New"]
    assert len(service.recent_schedules(30)) == 2


def test_concurrent_overlapping_creates_leave_one_winner():
    service = ScheduleService(ScheduleRepository(), locks=DayLocks())
    results: list = []
    barrier = threading.Barrier(8)

    def worker(n: int) -> None:
        barrier.wait()
        results.append(
            service.create_schedule(_request(f"Meeting {n}", _at(9, n), _at(10, n)))
        )

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    winners = [r for r in results if isinstance(r, ScheduleEntry)]
    assert len(winners) == 1
    assert len(service.list_schedules()) == 1


class _DeleteDuringUpdateRepository(ScheduleRepository):
    """Fires a delete from another thread while an update holds the day."""

    def __init__(self) -> None:
        super().__init__()
        self.service: ScheduleService | None = None
        self.target_id: str | None = None
        self.delete_results: list = []
        self.delete_thread: threading.Thread | None = None
        self.blocked_during_update = False

    def find_entries_on_day(self, day):
        if self.target_id is not None and self.delete_thread is None:
            self.delete_thread = threading.Thread(
                target=lambda: self.delete_results.append(
                    self.service.delete_schedule(self.target_id)
                )
            )
            self.delete_thread.start()
            self.delete_thread.join(timeout=0.2)
            self.blocked_during_update = self.delete_thread.is_alive()
        return super().find_entries_on_day(day)


def test_delete_waits_for_running_update_and_sticks():
    repo = _DeleteDuringUpdateRepository()
    service = ScheduleService(repo)
    repo.service = service
    entry = service.create_schedule(_request("A", _at(10), _at(11)))
    repo.target_id = entry.id

    updated = service.update_schedule(entry.id, _request("A", _at(10, 15), _at(11, 15)))
    repo.delete_thread.join(timeout=5)

    assert isinstance(updated, ScheduleEntry)
    assert repo.blocked_during_update
    assert repo.delete_results == [None]
    assert service.get_schedule(entry.id) is None


def test_day_locks_are_dropped_after_release():
    locks = DayLocks()
    with locks.hold(_at(0).date(), _at(0, day=16).date()):
        assert len(locks) == 2
    assert len(locks) == 0

    service = ScheduleService(ScheduleRepository(), locks=locks)
    entry = service.create_schedule(_request("A", _at(10), _at(11)))
    service.update_schedule(entry.id, _request("A", _at(10, day=17), _at(11, day=17)))
    service.delete_schedule(entry.id)
    assert len(locks) == 0
