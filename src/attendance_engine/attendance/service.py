from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.cache import TTLCache
from ..common.datetime_utils import hours_between, now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    CrossDayCheckoutError,
    DuplicateSessionError,
    InvalidTimeRangeError,
    NonWorkingDayError,
    OpenSessionConflictError,
    SessionAlreadyClosedError,
    SessionNotFoundError,
    ValidationError,
    WorkerNotFoundError,
)
from ..policies.service import PolicyService
from ..workers.repository import WorkerRepository
from .classifier import StatusClassifier
from .model import AttendanceSession, CaptureArtifact, Location
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Lifecycle of attendance sessions: NoSession -> Open -> Closed -> Corrected.

    Capture (photo + location) is a separate, earlier step; every transition
    here only receives the finished artifacts and checks they are present.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        workers: WorkerRepository,
        policies: PolicyService,
        *,
        classifier: Optional[StatusClassifier] = None,
        cache: Optional[TTLCache] = None,
        clock: Callable[[], datetime] = now_local,
        allow_non_working_day: bool = True,
    ):
        self._attendance = attendance
        self._workers = workers
        self._policies = policies
        self._classifier = classifier or StatusClassifier()
        self._cache = cache
        self._clock = clock
        self._allow_non_working_day = bool(allow_non_working_day)

    def check_in(
        self,
        worker_id: int,
        *,
        photo_ref: Optional[str],
        location: Optional[Location | dict],
        work_date: Optional[date] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceSession:
        capture = CaptureArtifact.build(photo_ref, location, prefix="check_in")
        now = now or self._clock()
        work_date = work_date or now.date()
        if work_date != now.date():
            raise ValidationError(
                f"Check-in for {work_date.isoformat()} must happen on that date",
                field="work_date",
                work_date=work_date,
            )

        if self._workers.get_by_id(worker_id) is None:
            raise WorkerNotFoundError(worker_id)

        if self._attendance.find_session(worker_id, work_date) is not None:
            logger.info("Rejected check-in: worker=%s already has a session on %s", worker_id, work_date)
            raise DuplicateSessionError(worker_id, work_date)

        open_session = self._attendance.find_open_session(worker_id)
        if open_session is not None:
            logger.info(
                "Rejected check-in: worker=%s still open on %s (session=%s)",
                worker_id, open_session.work_date, open_session.session_id,
            )
            raise OpenSessionConflictError(worker_id, open_session.work_date, session_id=open_session.session_id)

        if not self._policies.is_working_day(work_date):
            if not self._allow_non_working_day:
                raise NonWorkingDayError(work_date)
            logger.info("Check-in on non-working day %s for worker=%s", work_date, worker_id)

        session = AttendanceSession(
            session_id=0,
            worker_id=int(worker_id),
            work_date=work_date,
            check_in_time=now,
            check_in_photo_ref=capture.photo_ref,
            check_in_location=capture.location,
            status=AttendanceStatus.PRESENT,
            notes=(notes or "").strip() or None,
        )
        session_id = self._attendance.insert_session(session)
        session = replace(session, session_id=session_id)

        self._invalidate(worker_id)
        logger.info("Checked in worker=%s on %s (session=%s)", worker_id, work_date, session_id)
        return session

    def check_out(
        self,
        session_id: int,
        *,
        photo_ref: Optional[str],
        location: Optional[Location | dict],
        now: Optional[datetime] = None,
    ) -> AttendanceSession:
        capture = CaptureArtifact.build(photo_ref, location, prefix="check_out")
        now = now or self._clock()

        session = self._require(session_id)
        if not session.is_open:
            raise SessionAlreadyClosedError(session.session_id, session.work_date)
        if now.date() != session.work_date:
            logger.info(
                "Rejected check-out: session=%s opened %s, attempted %s",
                session.session_id, session.work_date, now.date(),
            )
            raise CrossDayCheckoutError(session.session_id, session.work_date, now.date())

        closed = self._close(
            replace(
                session,
                check_out_photo_ref=capture.photo_ref,
                check_out_location=capture.location,
            ),
            check_in=session.check_in_time,
            check_out=now,
        )
        self._attendance.update_session(closed)

        self._invalidate(closed.worker_id)
        logger.info(
            "Checked out session=%s worker=%s hours=%.2f status=%s",
            closed.session_id, closed.worker_id, closed.actual_working_hours, closed.status.value,
        )
        return closed

    def correct_times(
        self,
        session_id: int,
        new_check_in: datetime,
        new_check_out: Optional[datetime] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceSession:
        """Administrative override of the check-in/check-out times.

        Duplicate and open-session rules are not re-checked. When only the
        check-in changes, an existing check-out is kept and re-validated.
        """
        session = self._require(session_id)
        check_out = new_check_out if new_check_out is not None else session.check_out_time

        if check_out is not None:
            if check_out <= new_check_in:
                raise InvalidTimeRangeError(
                    "Check-out time must be after check-in time",
                    field="check_out_time",
                    session_id=session.session_id,
                )
            if check_out.date() != session.work_date:
                raise InvalidTimeRangeError(
                    f"Check-out must fall on {session.work_date.isoformat()}",
                    field="check_out_time",
                    session_id=session.session_id,
                    work_date=session.work_date,
                )

        corrected_at = now or self._clock()
        if check_out is None:
            corrected = replace(session, check_in_time=new_check_in, corrected_at=corrected_at)
        else:
            corrected = self._close(
                replace(session, corrected_at=corrected_at),
                check_in=new_check_in,
                check_out=check_out,
            )
        self._attendance.update_session(corrected)

        self._invalidate(corrected.worker_id)
        logger.info(
            "Corrected session=%s check_in=%s check_out=%s status=%s",
            corrected.session_id, corrected.check_in_time, corrected.check_out_time, corrected.status.value,
        )
        return corrected

    def delete_session(self, session_id: int) -> None:
        session = self._attendance.get_by_id(session_id)
        if not self._attendance.delete_session(session_id):
            raise SessionNotFoundError(session_id)
        if session is not None:
            self._invalidate(session.worker_id)
        logger.info("Deleted attendance session=%s", session_id)

    def get_session(self, session_id: int) -> AttendanceSession:
        return self._require(session_id)

    def get_open_session(self, worker_id: int) -> Optional[AttendanceSession]:
        return self._attendance.find_open_session(worker_id)

    def get_today_session(self, worker_id: int, today: Optional[date] = None) -> Optional[AttendanceSession]:
        return self._attendance.find_session(worker_id, today or self._clock().date())

    def list_for_worker(self, worker_id: int, start: date, end: date) -> Sequence[AttendanceSession]:
        if end < start:
            raise ValidationError("End date must not be before start date", field="end")
        return self._attendance.list_sessions(worker_id, start, end)

    def get_history(self, worker_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceSession]:
        return self._attendance.list_recent(worker_id, limit)

    def _require(self, session_id: int) -> AttendanceSession:
        session = self._attendance.get_by_id(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def _close(self, session: AttendanceSession, *, check_in: datetime, check_out: datetime) -> AttendanceSession:
        # Classify on the exact duration; only the stored value is rounded
        hours = hours_between(check_in, check_out)
        policy = self._policies.get_policy_for_date(session.work_date)
        return replace(
            session,
            check_in_time=check_in,
            check_out_time=check_out,
            actual_working_hours=round(hours, 2),
            status=self._classifier.classify(hours, policy),
        )

    def _invalidate(self, worker_id: int) -> None:
        if self._cache is not None:
            self._cache.invalidate_where(lambda key: key[1] == worker_id)
