from __future__ import annotations

from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from ...attendance.model import AttendanceSession
from ...core.enums import AttendanceStatus
from ..model import MonthlyAccrual, TeamAccrualSummary
from .base import AccrualCalculator

EARNED_DAY_WEIGHTS = {
    AttendanceStatus.FULL_DAY: 1.0,
    AttendanceStatus.PRESENT: 1.0,
    AttendanceStatus.HALF_DAY: 0.5,
    AttendanceStatus.OVERTIME: 1.5,
}


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves upward."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StandardAccrualCalculator(AccrualCalculator):
    """Standard rule: earned days (weighted by status) x monthly salary / days in month."""

    def earned_day_weight(self, status: AttendanceStatus) -> float:
        return EARNED_DAY_WEIGHTS.get(status, 0.0)

    def compute_accrual(
        self,
        monthly_salary: float,
        days_in_month: int,
        sessions: Sequence[AttendanceSession],
        *,
        working_days: Optional[int] = None,
    ) -> MonthlyAccrual:
        monthly_salary = float(monthly_salary or 0)
        per_diem = monthly_salary / days_in_month if days_in_month else 0.0

        counts = Counter(s.status for s in sessions)
        earned_days = sum(self.earned_day_weight(s.status) for s in sessions)
        earned_salary = round_half_up(earned_days * per_diem)

        attended = sum(n for status, n in counts.items() if status != AttendanceStatus.ABSENT)
        expected = days_in_month if working_days is None else working_days
        total_hours = sum(s.actual_working_hours or 0.0 for s in sessions)

        return MonthlyAccrual(
            monthly_salary=monthly_salary,
            days_in_month=int(days_in_month),
            per_diem_rate=per_diem,
            earned_days=earned_days,
            earned_salary=earned_salary,
            variance=monthly_salary - earned_salary,
            status_counts=dict(counts),
            absent_days=max(0, int(expected) - attended),
            total_hours=round(total_hours, 1),
        )

    def aggregate(self, accruals: Iterable[MonthlyAccrual]) -> TeamAccrualSummary:
        accruals = list(accruals)
        total_earned = sum(a.earned_salary for a in accruals)
        total_budget = sum(a.monthly_salary for a in accruals)
        percentage = (total_earned / total_budget * 100) if total_budget else 0.0
        return TeamAccrualSummary(
            total_earned=total_earned,
            total_budget=total_budget,
            percentage_earned=percentage,
            total_absent_days=sum(a.absent_days for a in accruals),
            headcount=len(accruals),
        )


_standard = StandardAccrualCalculator()


def compute_accrual(
    monthly_salary: float,
    days_in_month: int,
    sessions: Sequence[AttendanceSession],
    *,
    working_days: Optional[int] = None,
) -> MonthlyAccrual:
    return _standard.compute_accrual(monthly_salary, days_in_month, sessions, working_days=working_days)
