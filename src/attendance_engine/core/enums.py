from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status label stored on an attendance session."""

    PRESENT = "Present"
    ABSENT = "Absent"
    FULL_DAY = "Full Day"
    HALF_DAY = "Half Day"
    OVERTIME = "Overtime"


class SessionState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    CORRECTED = "CORRECTED"


class Weekday(str, Enum):
    """Weekday keys of the working-hours policy, ordered like date.weekday()."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def ordered(cls) -> list["Weekday"]:
        return list(cls)

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        return cls.ordered()[index]

    @property
    def index(self) -> int:
        return Weekday.ordered().index(self)
