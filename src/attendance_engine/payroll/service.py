from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.cache import TTLCache
from ..common.datetime_utils import days_in_month, month_bounds
from ..core.exceptions import WorkerNotFoundError
from ..policies.service import PolicyService
from ..workers.model import Worker
from ..workers.repository import WorkerRepository
from .calculator.base import AccrualCalculator
from .calculator.standard_calculator import StandardAccrualCalculator
from .model import MonthlyAccrual, TeamAccrualSummary

logger = logging.getLogger(__name__)


class PayrollService:
    """Monthly accruals per worker, always through the one AccrualCalculator.

    Results are cached under ``("accrual", worker_id, month, policy_version)``.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        workers: WorkerRepository,
        policies: PolicyService,
        *,
        calculator: Optional[AccrualCalculator] = None,
        cache: Optional[TTLCache] = None,
    ):
        self._attendance = attendance
        self._workers = workers
        self._policies = policies
        self._calculator = calculator or StandardAccrualCalculator()
        self._cache = cache

    @property
    def calculator(self) -> AccrualCalculator:
        return self._calculator

    def accrual_for_worker(self, worker_id: int, month: date) -> MonthlyAccrual:
        worker = self._workers.get_by_id(worker_id)
        if worker is None:
            raise WorkerNotFoundError(worker_id)
        return self.team_accruals(month, workers=[worker])[0]

    def team_accruals(
        self,
        month: date,
        *,
        workers: Optional[Sequence[Worker]] = None,
        limit: Optional[int] = None,
    ) -> list[MonthlyAccrual]:
        month = month.replace(day=1)
        if workers is None:
            workers = self._workers.list_active(limit=limit)

        version = self._policies.version
        result: dict[int, MonthlyAccrual] = {}
        missing: list[Worker] = []
        for w in workers:
            cached = self._cache.get(self._key(w.worker_id, month, version)) if self._cache else None
            if cached is not None:
                result[w.worker_id] = cached
            else:
                missing.append(w)

        if missing:
            start, end = month_bounds(month)
            by_worker = defaultdict(list)
            for s in self._attendance.list_sessions_for_workers([w.worker_id for w in missing], start, end):
                by_worker[s.worker_id].append(s)

            working_days = self._policies.working_days_between(start, end)
            n_days = days_in_month(month)
            for w in missing:
                accrual = self._calculator.compute_accrual(
                    w.monthly_salary,
                    n_days,
                    by_worker.get(w.worker_id, []),
                    working_days=working_days,
                )
                accrual = replace(
                    accrual,
                    worker_id=w.worker_id,
                    worker_name=w.full_name,
                    role=w.role,
                    month=month,
                )
                if self._cache is not None:
                    self._cache.set(self._key(w.worker_id, month, version), accrual)
                result[w.worker_id] = accrual
            logger.debug("Computed %s accruals for %s", len(missing), month.strftime("%Y-%m"))

        return [result[w.worker_id] for w in workers]

    def summarize(self, accruals: Sequence[MonthlyAccrual]) -> TeamAccrualSummary:
        return self._calculator.aggregate(accruals)

    @staticmethod
    def _key(worker_id: int, month: date, version: int) -> tuple:
        return ("accrual", int(worker_id), month, version)
