from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest
from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from attendance_engine.attendance.model import AttendanceSession, Location
from attendance_engine.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from attendance_engine.core.enums import AttendanceStatus
from attendance_engine.core.exceptions import DuplicateSessionError, StorageUnavailableError
from attendance_engine.database.mysql_base import db_cursor, normalize_mysql_time


class FakeCursor:
    def __init__(self, error=None, lastrowid=7):
        self.error = error
        self.lastrowid = lastrowid
        self.statements = []
        self.closed = False

    def execute(self, sql, params=None):
        self.statements.append((sql, params))
        if self.error is not None:
            raise self.error

    def fetchone(self):
        return None

    def fetchall(self):
        return []

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self.cur = cursor
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cur

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self, *, execute_error=None, connect_error=None):
        self.connect_error = connect_error
        self.conn = FakeConnection(FakeCursor(error=execute_error))

    def connect(self, *, with_database=True):
        if self.connect_error is not None:
            raise self.connect_error
        return self.conn


def _session() -> AttendanceSession:
    return AttendanceSession(
        session_id=0,
        worker_id=1,
        work_date=date(2026, 3, 2),
        check_in_time=datetime(2026, 3, 2, 9, 0),
        status=AttendanceStatus.PRESENT,
        check_in_photo_ref="media/attendance/selfie-001.jpg",
        check_in_location=Location(lat=19.076, lng=72.8777, address="Andheri East, Mumbai"),
    )


def test_insert_returns_new_id_and_commits():
    factory = FakeConnectionFactory()

    session_id = MySQLAttendanceRepository(factory).insert_session(_session())

    assert session_id == 7
    assert factory.conn.commits == 1
    assert factory.conn.closed
    _, params = factory.conn.cur.statements[0]
    assert params[:2] == (1, date(2026, 3, 2))
    assert '"address": "Andheri East, Mumbai"' in params[4]


def test_unique_key_violation_becomes_duplicate_session():
    dup = mysql_errors.IntegrityError(msg="Duplicate entry '1-2026-03-02'", errno=errorcode.ER_DUP_ENTRY)
    factory = FakeConnectionFactory(execute_error=dup)

    with pytest.raises(DuplicateSessionError) as exc:
        MySQLAttendanceRepository(factory).insert_session(_session())

    assert exc.value.work_date == date(2026, 3, 2)
    assert factory.conn.rollbacks == 1
    assert factory.conn.commits == 0
    assert factory.conn.closed


def test_other_integrity_errors_propagate():
    fk = mysql_errors.IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    factory = FakeConnectionFactory(execute_error=fk)

    with pytest.raises(mysql_errors.IntegrityError):
        MySQLAttendanceRepository(factory).insert_session(_session())


@pytest.mark.parametrize(
    "error",
    [
        mysql_errors.OperationalError(msg="Lost connection to MySQL server during query", errno=2013),
        mysql_errors.InterfaceError(msg="MySQL Connection not available", errno=2055),
    ],
)
def test_transient_query_errors_are_retryable(error):
    factory = FakeConnectionFactory(execute_error=error)

    with pytest.raises(StorageUnavailableError) as exc:
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT 1")

    assert exc.value.retryable is True
    assert factory.conn.rollbacks == 1
    assert factory.conn.cur.closed
    assert factory.conn.closed


def test_connect_failure_is_retryable():
    factory = FakeConnectionFactory(
        connect_error=mysql_errors.InterfaceError(msg="Can't connect to MySQL server", errno=2003),
    )

    with pytest.raises(StorageUnavailableError):
        MySQLAttendanceRepository(factory).insert_session(_session())


def test_other_errors_roll_back_and_keep_their_type():
    factory = FakeConnectionFactory()

    with pytest.raises(KeyError):
        with db_cursor(factory):
            raise KeyError("id")

    assert factory.conn.rollbacks == 1
    assert factory.conn.commits == 0


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        (time(9, 0), time(9, 0)),
        (timedelta(hours=9, minutes=30), time(9, 30)),
        (timedelta(hours=18, seconds=15), time(18, 0, 15)),
        ("08:30:00", time(8, 30)),
        ("17:45", time(17, 45)),
    ],
)
def test_normalize_mysql_time(value, expected):
    assert normalize_mysql_time(value) == expected


def test_normalize_mysql_time_rejects_garbage():
    with pytest.raises(ValueError):
        normalize_mysql_time("nine")
    with pytest.raises(TypeError):
        normalize_mysql_time(930)
