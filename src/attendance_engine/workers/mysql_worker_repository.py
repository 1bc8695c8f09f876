from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Worker
from .repository import WorkerRepository


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_worker(r: dict) -> Worker:
        return Worker(
            worker_id=int(r["worker_id"]),
            full_name=r["full_name"],
            monthly_salary=float(r.get("monthly_salary") or 0),
            role=r.get("role"),
            is_active=bool(r.get("is_active", 1)),
        )

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT worker_id, full_name, role, monthly_salary, is_active
                FROM workers
                WHERE worker_id=%s
                """,
                (int(worker_id),),
            )
            r = fetchone(cur)
            return self._to_worker(r) if r else None

    def list_active(self, *, limit: Optional[int] = None) -> Sequence[Worker]:
        sql = """
            SELECT worker_id, full_name, role, monthly_salary, is_active
            FROM workers
            WHERE is_active=1
            ORDER BY worker_id
        """
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT %s"
            params = (int(limit),)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [self._to_worker(r) for r in fetchall(cur)]
