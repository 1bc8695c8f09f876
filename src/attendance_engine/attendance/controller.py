from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.http import arg_date, json_body, parse_datetime
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _worker_id(data: dict) -> int:
        try:
            return int(data.get("worker_id"))
        except (TypeError, ValueError):
            raise ValidationError("worker_id is required", field="worker_id")

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    def api_check_in():
        data = json_body()
        work_date = None
        if data.get("date"):
            try:
                work_date = parse_iso_date(str(data["date"]))
            except ValueError:
                raise ValidationError("date must be formatted as YYYY-MM-DD", field="date")

        session = service.check_in(
            _worker_id(data),
            photo_ref=data.get("photo_ref"),
            location=data.get("location"),
            work_date=work_date,
            notes=data.get("notes"),
        )
        return jsonify({"success": True, "message": "Attendance marked successfully", "session": session.to_dict()}), 201

    @app.route("/api/attendance/<int:session_id>/check-out", methods=["POST"], endpoint="api_check_out")
    def api_check_out(session_id: int):
        data = json_body()
        session = service.check_out(session_id, photo_ref=data.get("photo_ref"), location=data.get("location"))
        return jsonify({"success": True, "message": "Check-out marked successfully", "session": session.to_dict()})

    @app.route("/api/attendance/<int:session_id>/times", methods=["PUT"], endpoint="api_correct_times")
    def api_correct_times(session_id: int):
        data = json_body()
        new_check_in = parse_datetime(data.get("check_in_time"), "check_in_time")
        new_check_out = None
        if data.get("check_out_time"):
            new_check_out = parse_datetime(data.get("check_out_time"), "check_out_time")

        session = service.correct_times(session_id, new_check_in, new_check_out)
        return jsonify({"success": True, "session": session.to_dict()})

    @app.route("/api/attendance/<int:session_id>", methods=["GET"], endpoint="api_get_session")
    def api_get_session(session_id: int):
        return jsonify({"success": True, "session": service.get_session(session_id).to_dict()})

    @app.route("/api/attendance/<int:session_id>", methods=["DELETE"], endpoint="api_delete_session")
    def api_delete_session(session_id: int):
        service.delete_session(session_id)
        return jsonify({"success": True, "message": f"Session {session_id} deleted"})

    @app.route("/api/workers/<int:worker_id>/attendance", methods=["GET"], endpoint="api_worker_attendance")
    def api_worker_attendance(worker_id: int):
        today = container.clock().date()
        start = arg_date("start", today.replace(day=1))
        end = arg_date("end", today)

        sessions = service.list_for_worker(worker_id, start, end)
        return jsonify({
            "success": True,
            "start": start.isoformat(),
            "end": end.isoformat(),
            "sessions": [s.to_dict() for s in sessions],
        })

    @app.route("/api/workers/<int:worker_id>/attendance/open", methods=["GET"], endpoint="api_worker_open_session")
    def api_worker_open_session(worker_id: int):
        session = service.get_open_session(worker_id)
        return jsonify({"success": True, "session": session.to_dict() if session else None})
