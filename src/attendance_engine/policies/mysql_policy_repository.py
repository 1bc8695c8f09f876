from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import WeekdayPolicy
from .repository import PolicyRepository

_COLUMNS = "day, is_working_day, start_time, end_time, full_day_hours, half_day_hours, overtime_hours"


class MySQLPolicyRepository(PolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_policy(r: dict) -> WeekdayPolicy:
        return WeekdayPolicy(
            weekday=Weekday(r["day"]),
            is_working_day=bool(r["is_working_day"]),
            start_time=normalize_mysql_time(r["start_time"]),
            end_time=normalize_mysql_time(r["end_time"]),
            full_day_hours=float(r["full_day_hours"]),
            half_day_hours=float(r["half_day_hours"]),
            overtime_hours=float(r["overtime_hours"]),
        )

    def get(self, weekday: Weekday) -> Optional[WeekdayPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM working_hours_settings WHERE day=%s",
                (weekday.value,),
            )
            r = fetchone(cur)
            return self._to_policy(r) if r else None

    def list_all(self) -> Sequence[WeekdayPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM working_hours_settings")
            policies = [self._to_policy(r) for r in fetchall(cur)]
        return sorted(policies, key=lambda p: p.weekday.index)

    def upsert(self, policy: WeekdayPolicy) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO working_hours_settings
                    (day, is_working_day, start_time, end_time, total_working_hours,
                     full_day_hours, half_day_hours, overtime_hours)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    is_working_day=VALUES(is_working_day),
                    start_time=VALUES(start_time),
                    end_time=VALUES(end_time),
                    total_working_hours=VALUES(total_working_hours),
                    full_day_hours=VALUES(full_day_hours),
                    half_day_hours=VALUES(half_day_hours),
                    overtime_hours=VALUES(overtime_hours)
                """,
                (
                    policy.weekday.value,
                    int(policy.is_working_day),
                    policy.start_time,
                    policy.end_time,
                    policy.nominal_working_hours,
                    policy.full_day_hours,
                    policy.half_day_hours,
                    policy.overtime_hours,
                ),
            )
