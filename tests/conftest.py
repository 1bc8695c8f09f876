from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

import pytest

from attendance_engine.attendance.model import AttendanceSession
from attendance_engine.container import build_services
from attendance_engine.core.enums import Weekday
from attendance_engine.core.exceptions import DuplicateSessionError
from attendance_engine.policies.model import WeekdayPolicy, default_policy
from attendance_engine.workers.model import Worker


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryAttendance:
    def __init__(self):
        self._by_id: dict[int, AttendanceSession] = {}
        self._id = 0

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        return self._by_id.get(int(session_id))

    def find_session(self, worker_id: int, work_date: date) -> Optional[AttendanceSession]:
        for s in self._by_id.values():
            if s.worker_id == worker_id and s.work_date == work_date:
                return s
        return None

    def find_open_session(self, worker_id: int) -> Optional[AttendanceSession]:
        open_sessions = [s for s in self._by_id.values() if s.worker_id == worker_id and s.is_open]
        return min(open_sessions, key=lambda s: s.work_date) if open_sessions else None

    def insert_session(self, session: AttendanceSession) -> int:
        # Unique key (worker_id, date), checked independently of find_session
        taken = {(s.worker_id, s.work_date) for s in self._by_id.values()}
        if (session.worker_id, session.work_date) in taken:
            raise DuplicateSessionError(session.worker_id, session.work_date)
        self._id += 1
        self._by_id[self._id] = replace(session, session_id=self._id)
        return self._id

    def update_session(self, session: AttendanceSession) -> bool:
        if session.session_id not in self._by_id:
            return False
        self._by_id[session.session_id] = session
        return True

    def delete_session(self, session_id: int) -> bool:
        return self._by_id.pop(int(session_id), None) is not None

    def list_sessions(self, worker_id: int, start: date, end: date):
        return self.list_sessions_for_workers([worker_id], start, end)

    def list_sessions_for_workers(self, worker_ids: Iterable[int], start: date, end: date):
        ids = set(worker_ids)
        items = [s for s in self._by_id.values() if s.worker_id in ids and start <= s.work_date <= end]
        return sorted(items, key=lambda s: (s.worker_id, s.work_date))

    def list_recent(self, worker_id: int, limit: int):
        items = [s for s in self._by_id.values() if s.worker_id == worker_id]
        items.sort(key=lambda s: s.work_date, reverse=True)
        return items[:limit]

    def add(self, **fields) -> AttendanceSession:
        """Insert a ready-made session (used to set up report fixtures)."""
        session = AttendanceSession(session_id=0, **fields)
        session_id = self.insert_session(session)
        return self._by_id[session_id]


class InMemoryWorkers:
    def __init__(self, workers: Iterable[Worker] = ()):
        self.workers = {w.worker_id: w for w in workers}

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        return self.workers.get(int(worker_id))

    def list_active(self, *, limit: Optional[int] = None):
        items = [w for w in sorted(self.workers.values(), key=lambda w: w.worker_id) if w.is_active]
        return items[:limit] if limit is not None else items


class InMemoryPolicies:
    def __init__(self, policies: Optional[Iterable[WeekdayPolicy]] = None):
        if policies is None:
            policies = [default_policy(day) for day in Weekday.ordered()]
        self.policies = {p.weekday: p for p in policies}
        self.upserts = 0

    def get(self, weekday: Weekday) -> Optional[WeekdayPolicy]:
        return self.policies.get(weekday)

    def list_all(self):
        return list(self.policies.values())

    def upsert(self, policy: WeekdayPolicy) -> None:
        self.upserts += 1
        self.policies[policy.weekday] = policy


# 2026-03-02 is a Monday
MONDAY = date(2026, 3, 2)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 2, 9, 0))


@pytest.fixture
def workers_repo() -> InMemoryWorkers:
    return InMemoryWorkers(
        [
            Worker(worker_id=1, full_name="Asha Verma", monthly_salary=30000, role="Sales"),
            Worker(worker_id=2, full_name="Rohan Mehta", monthly_salary=45000, role="Support"),
            Worker(worker_id=3, full_name="Former Staff", monthly_salary=20000, is_active=False),
        ]
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def policies_repo() -> InMemoryPolicies:
    return InMemoryPolicies()


@pytest.fixture
def container(attendance_repo, workers_repo, policies_repo, clock):
    return build_services(
        attendance_repo=attendance_repo,
        workers_repo=workers_repo,
        policies_repo=policies_repo,
        cache_ttl_seconds=300,
        clock=clock,
    )


@pytest.fixture
def capture() -> dict:
    return {
        "photo_ref": "media/attendance/selfie-001.jpg",
        "location": {"lat": 19.076, "lng": 72.8777, "address": "Andheri East, Mumbai"},
    }
