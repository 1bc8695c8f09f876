from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.classifier import StatusClassifier
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.cache import TTLCache
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_ACCRUAL_CACHE_TTL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .payroll.calculator.standard_calculator import StandardAccrualCalculator
from .payroll.service import PayrollService
from .policies.mysql_policy_repository import MySQLPolicyRepository
from .policies.repository import PolicyRepository
from .policies.service import PolicyService
from .reports.service import ReportService
from .workers.mysql_worker_repository import MySQLWorkerRepository
from .workers.repository import WorkerRepository


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    workers_repo: WorkerRepository
    policies_repo: PolicyRepository

    accrual_cache: TTLCache

    policy_service: PolicyService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    report_service: ReportService

    clock: Callable[[], datetime] = now_local


def build_services(
    *,
    attendance_repo: AttendanceRepository,
    workers_repo: WorkerRepository,
    policies_repo: PolicyRepository,
    cache_ttl_seconds: float = DEFAULT_ACCRUAL_CACHE_TTL_SECONDS,
    enforce_policy_order: bool = False,
    allow_non_working_day: bool = True,
    clock: Optional[Callable[[], datetime]] = None,
) -> Container:
    clock = clock or now_local
    cache: TTLCache = TTLCache(cache_ttl_seconds, clock=clock)

    policy_service = PolicyService(policies_repo, enforce_order=enforce_policy_order, cache=cache)
    attendance_service = AttendanceService(
        attendance_repo,
        workers_repo,
        policy_service,
        classifier=StatusClassifier(),
        cache=cache,
        clock=clock,
        allow_non_working_day=allow_non_working_day,
    )
    payroll_service = PayrollService(
        attendance_repo,
        workers_repo,
        policy_service,
        calculator=StandardAccrualCalculator(),
        cache=cache,
    )
    report_service = ReportService(payroll_service, attendance_repo, workers_repo)

    return Container(
        attendance_repo=attendance_repo,
        workers_repo=workers_repo,
        policies_repo=policies_repo,
        accrual_cache=cache,
        policy_service=policy_service,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        report_service=report_service,
        clock=clock,
    )


def build_container(*, db_config: dict, settings=None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return build_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        workers_repo=MySQLWorkerRepository(conn),
        policies_repo=MySQLPolicyRepository(conn),
        cache_ttl_seconds=getattr(settings, "ACCRUAL_CACHE_TTL_SECONDS", DEFAULT_ACCRUAL_CACHE_TTL_SECONDS),
        enforce_policy_order=bool(getattr(settings, "ENFORCE_POLICY_ORDER", False)),
        allow_non_working_day=bool(getattr(settings, "ALLOW_NON_WORKING_DAY_CHECKIN", True)),
    )
