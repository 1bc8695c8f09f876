from __future__ import annotations

from datetime import date
from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is a stable identifier for API clients and ``context`` carries the
    values (dates, ids) a caller needs to explain the refusal.
    """

    code = "domain_error"
    retryable = False

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        payload = {"error": self.code, "message": self.message}
        for key, value in self.context.items():
            payload[key] = value.isoformat() if isinstance(value, date) else value
        return payload


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"

    def __init__(self, message: str, *, field: Optional[str] = None, **context: Any):
        super().__init__(message, field=field, **context)
        self.field = field


class InvalidTimeRangeError(ValidationError):
    code = "invalid_time_range"


class WorkerNotFoundError(ValidationError):
    code = "worker_not_found"

    def __init__(self, worker_id: int):
        super().__init__(f"Worker {worker_id} does not exist", field="worker_id", worker_id=worker_id)
        self.worker_id = worker_id


class NonWorkingDayError(ValidationError):
    code = "non_working_day"

    def __init__(self, work_date: date):
        super().__init__(
            f"{work_date.isoformat()} ({work_date.strftime('%A')}) is not a working day",
            field="work_date",
            work_date=work_date,
        )
        self.work_date = work_date


class PolicyValidationError(ValidationError):
    code = "invalid_policy"

    def __init__(self, problems: list[str], *, weekday: str):
        super().__init__("; ".join(problems), field="policy", weekday=weekday, problems=list(problems))
        self.problems = list(problems)


class DuplicateSessionError(DomainError):
    code = "duplicate_session"

    def __init__(self, worker_id: int, work_date: date):
        super().__init__(
            f"Attendance already marked for {work_date.isoformat()}",
            worker_id=worker_id,
            work_date=work_date,
        )
        self.worker_id = worker_id
        self.work_date = work_date


class OpenSessionConflictError(DomainError):
    code = "open_session_conflict"

    def __init__(self, worker_id: int, open_date: date, *, session_id: Optional[int] = None):
        super().__init__(
            f"Check out of the session opened on {open_date.isoformat()} before checking in again",
            worker_id=worker_id,
            open_date=open_date,
            session_id=session_id,
        )
        self.worker_id = worker_id
        self.open_date = open_date
        self.session_id = session_id


class CrossDayCheckoutError(DomainError):
    code = "cross_day_checkout"

    def __init__(self, session_id: int, session_date: date, attempted_date: date):
        super().__init__(
            f"Session {session_id} was opened on {session_date.isoformat()} "
            f"and cannot be checked out on {attempted_date.isoformat()}",
            session_id=session_id,
            session_date=session_date,
            attempted_date=attempted_date,
        )
        self.session_id = session_id
        self.session_date = session_date
        self.attempted_date = attempted_date


class SessionNotFoundError(DomainError):
    code = "session_not_found"

    def __init__(self, session_id: int):
        super().__init__(f"Attendance session {session_id} does not exist", session_id=session_id)
        self.session_id = session_id


class SessionAlreadyClosedError(DomainError):
    code = "session_already_closed"

    def __init__(self, session_id: int, work_date: date):
        super().__init__(
            f"Session {session_id} for {work_date.isoformat()} is already checked out",
            session_id=session_id,
            work_date=work_date,
        )
        self.session_id = session_id
        self.work_date = work_date


class StorageUnavailableError(Exception):
    """Transient storage failure (timeout, lost connection). Safe to retry."""

    code = "storage_unavailable"
    retryable = True
