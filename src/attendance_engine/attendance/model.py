from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.validators import require_non_empty, require_number
from ..core.enums import AttendanceStatus, SessionState
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float
    address: str

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng, "address": self.address}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["Location"]:
        if not data:
            return None
        return cls(lat=float(data["lat"]), lng=float(data["lng"]), address=str(data.get("address") or ""))


@dataclass(frozen=True)
class CaptureArtifact:
    """Photo + location handed over by the capture step.

    The capture (camera, GPS, reverse geocoding) happens before the engine is
    called; both references are opaque here and only checked for presence.
    """

    photo_ref: str
    location: Location

    @classmethod
    def build(cls, photo_ref: Optional[str], location, *, prefix: str) -> "CaptureArtifact":
        photo_ref = require_non_empty(photo_ref, f"{prefix}_photo_ref")
        if location is None:
            raise ValidationError(f"{prefix}_location is required", field=f"{prefix}_location")
        if isinstance(location, dict):
            location = Location(
                lat=require_number(location.get("lat"), f"{prefix}_location.lat"),
                lng=require_number(location.get("lng"), f"{prefix}_location.lng"),
                address=location.get("address"),
            )
        elif not isinstance(location, Location):
            raise ValidationError(f"{prefix}_location must be an object", field=f"{prefix}_location")
        address = require_non_empty(location.address, f"{prefix}_location.address")
        return cls(photo_ref=photo_ref, location=Location(lat=float(location.lat), lng=float(location.lng), address=address))


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one worker's attendance for one calendar date."""

    session_id: int
    worker_id: int
    work_date: date
    check_in_time: datetime
    status: AttendanceStatus
    check_in_photo_ref: Optional[str] = None
    check_in_location: Optional[Location] = None
    check_out_time: Optional[datetime] = None
    check_out_photo_ref: Optional[str] = None
    check_out_location: Optional[Location] = None
    actual_working_hours: Optional[float] = None
    notes: Optional[str] = None
    corrected_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    @property
    def state(self) -> SessionState:
        if self.corrected_at is not None:
            return SessionState.CORRECTED
        if self.is_open:
            return SessionState.OPEN
        return SessionState.CLOSED

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "worker_id": self.worker_id,
            "date": self.work_date.isoformat(),
            "check_in_time": self.check_in_time.isoformat(),
            "check_in_photo_ref": self.check_in_photo_ref,
            "check_in_location": self.check_in_location.to_dict() if self.check_in_location else None,
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "check_out_photo_ref": self.check_out_photo_ref,
            "check_out_location": self.check_out_location.to_dict() if self.check_out_location else None,
            "status": self.status.value,
            "actual_working_hours": self.actual_working_hours,
            "notes": self.notes,
            "state": self.state.value,
        }
