from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceSession


class AttendanceRepository(Protocol):
    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def find_session(self, worker_id: int, work_date: date) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def find_open_session(self, worker_id: int) -> Optional[AttendanceSession]:
        """Any session of the worker without a check-out, oldest first."""

        raise NotImplementedError

    def insert_session(self, session: AttendanceSession) -> int:
        """Persist a new session and return its id.

        Must raise DuplicateSessionError when (worker_id, work_date) is taken.
        """

        raise NotImplementedError

    def update_session(self, session: AttendanceSession) -> bool:
        raise NotImplementedError

    def delete_session(self, session_id: int) -> bool:
        raise NotImplementedError

    def list_sessions(self, worker_id: int, start: date, end: date) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def list_sessions_for_workers(
        self, worker_ids: Iterable[int], start: date, end: date
    ) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def list_recent(self, worker_id: int, limit: int) -> Sequence[AttendanceSession]:
        raise NotImplementedError
