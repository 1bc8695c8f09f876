from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, time

from ..core import constants
from ..core.enums import Weekday


@dataclass(frozen=True)
class WeekdayPolicy:
    """Working-hours configuration for one weekday."""

    weekday: Weekday
    is_working_day: bool
    start_time: time
    end_time: time
    full_day_hours: float
    half_day_hours: float
    overtime_hours: float

    @property
    def nominal_working_hours(self) -> float:
        if not self.is_working_day:
            return 0.0
        start = datetime.combine(datetime.min, self.start_time)
        end = datetime.combine(datetime.min, self.end_time)
        return max(0.0, (end - start).total_seconds() / 3600)

    def with_schedule_of(self, other: "WeekdayPolicy") -> "WeekdayPolicy":
        """Copy times and thresholds from ``other``, keeping this day's working flag."""
        return replace(
            self,
            start_time=other.start_time,
            end_time=other.end_time,
            full_day_hours=other.full_day_hours,
            half_day_hours=other.half_day_hours,
            overtime_hours=other.overtime_hours,
        )


def default_policy(weekday: Weekday) -> WeekdayPolicy:
    return WeekdayPolicy(
        weekday=weekday,
        is_working_day=weekday not in (Weekday.SATURDAY, Weekday.SUNDAY),
        start_time=constants.DEFAULT_START_TIME,
        end_time=constants.DEFAULT_END_TIME,
        full_day_hours=constants.DEFAULT_FULL_DAY_HOURS,
        half_day_hours=constants.DEFAULT_HALF_DAY_HOURS,
        overtime_hours=constants.DEFAULT_OVERTIME_HOURS,
    )


def validate_policy(policy: WeekdayPolicy) -> list[str]:
    """Return the ordering problems of a policy (empty when consistent).

    The classifier assumes ``0 <= half_day <= full_day <= overtime``.
    """
    problems: list[str] = []
    if policy.half_day_hours < 0:
        problems.append("half_day_hours cannot be negative")
    if policy.half_day_hours > policy.full_day_hours:
        problems.append("half_day_hours must not exceed full_day_hours")
    if policy.full_day_hours > policy.overtime_hours:
        problems.append("full_day_hours must not exceed overtime_hours")
    if policy.is_working_day and policy.end_time <= policy.start_time:
        problems.append("end_time must be after start_time")
    return problems
