from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

from ...attendance.model import AttendanceSession
from ..model import MonthlyAccrual, TeamAccrualSummary


class AccrualCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute_accrual(
        self,
        monthly_salary: float,
        days_in_month: int,
        sessions: Sequence[AttendanceSession],
        *,
        working_days: Optional[int] = None,
    ) -> MonthlyAccrual:
        raise NotImplementedError

    @abstractmethod
    def aggregate(self, accruals: Iterable[MonthlyAccrual]) -> TeamAccrualSummary:
        raise NotImplementedError
