from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateSessionError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, is_duplicate_key, load_json
from .model import AttendanceSession, Location
from .repository import AttendanceRepository

_COLUMNS = """
    id, worker_id, date, check_in_time, check_in_photo_ref, check_in_location,
    check_out_time, check_out_photo_ref, check_out_location, status,
    actual_working_hours, notes, corrected_at
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_session(r: dict) -> AttendanceSession:
        hours = r.get("actual_working_hours")
        return AttendanceSession(
            session_id=int(r["id"]),
            worker_id=int(r["worker_id"]),
            work_date=r["date"],
            check_in_time=r["check_in_time"],
            check_in_photo_ref=r.get("check_in_photo_ref"),
            check_in_location=Location.from_dict(load_json(r.get("check_in_location"))),
            check_out_time=r.get("check_out_time"),
            check_out_photo_ref=r.get("check_out_photo_ref"),
            check_out_location=Location.from_dict(load_json(r.get("check_out_location"))),
            status=AttendanceStatus(r["status"]),
            actual_working_hours=float(hours) if hours is not None else None,
            notes=r.get("notes"),
            corrected_at=r.get("corrected_at"),
        )

    def _select_one(self, where: str, params: tuple) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE {where}", params)
            r = fetchone(cur)
            return self._to_session(r) if r else None

    def _select_many(self, where: str, params: tuple, *, suffix: str = "") -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE {where} {suffix}", params)
            return [self._to_session(r) for r in fetchall(cur)]

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        return self._select_one("id=%s", (int(session_id),))

    def find_session(self, worker_id: int, work_date: date) -> Optional[AttendanceSession]:
        return self._select_one("worker_id=%s AND date=%s", (int(worker_id), work_date))

    def find_open_session(self, worker_id: int) -> Optional[AttendanceSession]:
        return self._select_one(
            "worker_id=%s AND check_out_time IS NULL ORDER BY date ASC LIMIT 1",
            (int(worker_id),),
        )

    def insert_session(self, session: AttendanceSession) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(
                        worker_id, date, check_in_time, check_in_photo_ref, check_in_location,
                        status, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        session.worker_id,
                        session.work_date,
                        session.check_in_time,
                        session.check_in_photo_ref,
                        dump_json(session.check_in_location.to_dict() if session.check_in_location else None),
                        session.status.value,
                        session.notes,
                    ),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateSessionError(session.worker_id, session.work_date) from exc
            raise

    def update_session(self, session: AttendanceSession) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_in_time=%s, check_out_time=%s, check_out_photo_ref=%s,
                    check_out_location=%s, status=%s, actual_working_hours=%s,
                    notes=%s, corrected_at=%s
                WHERE id=%s
                """,
                (
                    session.check_in_time,
                    session.check_out_time,
                    session.check_out_photo_ref,
                    dump_json(session.check_out_location.to_dict() if session.check_out_location else None),
                    session.status.value,
                    session.actual_working_hours,
                    session.notes,
                    session.corrected_at,
                    session.session_id,
                ),
            )
            return cur.rowcount > 0

    def delete_session(self, session_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE id=%s", (int(session_id),))
            return cur.rowcount > 0

    def list_sessions(self, worker_id: int, start: date, end: date) -> Sequence[AttendanceSession]:
        return self._select_many(
            "worker_id=%s AND date BETWEEN %s AND %s",
            (int(worker_id), start, end),
            suffix="ORDER BY date ASC",
        )

    def list_sessions_for_workers(
        self, worker_ids: Iterable[int], start: date, end: date
    ) -> Sequence[AttendanceSession]:
        ids = [int(w) for w in worker_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        return self._select_many(
            f"worker_id IN ({placeholders}) AND date BETWEEN %s AND %s",
            (*ids, start, end),
            suffix="ORDER BY worker_id ASC, date ASC",
        )

    def list_recent(self, worker_id: int, limit: int) -> Sequence[AttendanceSession]:
        return self._select_many(
            "worker_id=%s",
            (int(worker_id),),
            suffix=f"ORDER BY date DESC LIMIT {int(limit)}",
        )
