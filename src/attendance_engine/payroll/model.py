from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class MonthlyAccrual:
    """Derived payroll figures of one worker for one month (never stored)."""

    monthly_salary: float
    days_in_month: int
    per_diem_rate: float
    earned_days: float
    earned_salary: int
    variance: float
    status_counts: dict = field(default_factory=dict)
    absent_days: int = 0
    total_hours: float = 0.0
    worker_id: Optional[int] = None
    worker_name: Optional[str] = None
    role: Optional[str] = None
    month: Optional[date] = None

    def count(self, status: AttendanceStatus) -> int:
        return int(self.status_counts.get(status, 0))

    def to_row(self) -> dict:
        return {
            "worker_id": self.worker_id,
            "name": self.worker_name,
            "role": self.role or "",
            "total_days": self.days_in_month,
            "present_days": self.count(AttendanceStatus.PRESENT),
            "half_days": self.count(AttendanceStatus.HALF_DAY),
            "full_days": self.count(AttendanceStatus.FULL_DAY),
            "overtime_days": self.count(AttendanceStatus.OVERTIME),
            "absent_days": self.absent_days,
            "total_hours": self.total_hours,
            "monthly_salary": self.monthly_salary,
            "per_diem_rate": self.per_diem_rate,
            "earned_days": self.earned_days,
            "earned_salary": self.earned_salary,
            "variance": self.variance,
        }


@dataclass(frozen=True)
class TeamAccrualSummary:
    total_earned: int
    total_budget: float
    percentage_earned: float
    total_absent_days: int
    headcount: int

    def to_dict(self) -> dict:
        return {
            "total_earned": self.total_earned,
            "total_budget": self.total_budget,
            "percentage_earned": self.percentage_earned,
            "total_absent_days": self.total_absent_days,
            "headcount": self.headcount,
        }
