from __future__ import annotations

from dataclasses import replace

from flask import Flask, jsonify

from ..common.datetime_utils import parse_hhmm
from ..common.http import json_body
from ..common.validators import require_non_negative
from ..core.enums import Weekday
from ..core.exceptions import ValidationError
from ..container import Container
from .model import WeekdayPolicy


def policy_to_dict(policy: WeekdayPolicy) -> dict:
    return {
        "day": policy.weekday.value,
        "is_working_day": policy.is_working_day,
        "start_time": policy.start_time.strftime("%H:%M"),
        "end_time": policy.end_time.strftime("%H:%M"),
        "total_working_hours": round(policy.nominal_working_hours, 2),
        "full_day_hours": policy.full_day_hours,
        "half_day_hours": policy.half_day_hours,
        "overtime_hours": policy.overtime_hours,
    }


def register(app: Flask, container: Container) -> None:
    service = container.policy_service

    def _weekday(value: str) -> Weekday:
        try:
            return Weekday(value.lower())
        except ValueError:
            raise ValidationError(f"Unknown weekday: {value}", field="day")

    def _changes(data: dict) -> dict:
        changes: dict = {}
        if "is_working_day" in data:
            if not isinstance(data["is_working_day"], bool):
                raise ValidationError("is_working_day must be true or false", field="is_working_day")
            changes["is_working_day"] = data["is_working_day"]
        for key in ("start_time", "end_time"):
            if data.get(key):
                changes[key] = parse_hhmm(str(data[key]), key)
        for key in ("full_day_hours", "half_day_hours", "overtime_hours"):
            if data.get(key) is not None:
                changes[key] = require_non_negative(data[key], key)
        return changes

    @app.route("/api/settings/working-hours", methods=["GET"], endpoint="api_working_hours")
    def api_working_hours():
        return jsonify({
            "success": True,
            "version": service.version,
            "days": [policy_to_dict(p) for p in service.list_policies()],
        })

    @app.route("/api/settings/working-hours/<day>", methods=["GET"], endpoint="api_working_hours_day")
    def api_working_hours_day(day: str):
        return jsonify({"success": True, "policy": policy_to_dict(service.get_policy(_weekday(day)))})

    @app.route("/api/settings/working-hours/<day>", methods=["PUT"], endpoint="api_working_hours_update")
    def api_working_hours_update(day: str):
        policy = service.update_policy(_weekday(day), **_changes(json_body()))
        return jsonify({
            "success": True,
            "version": service.version,
            "policy": policy_to_dict(policy),
            "warnings": service.check(policy),
        })

    @app.route("/api/settings/working-hours/<day>/validate", methods=["POST"], endpoint="api_working_hours_validate")
    def api_working_hours_validate(day: str):
        candidate = replace(service.get_policy(_weekday(day)), **_changes(json_body()))
        problems = service.check(candidate)
        return jsonify({"success": True, "valid": not problems, "problems": problems})

    @app.route("/api/settings/working-hours/apply/<day>", methods=["POST"], endpoint="api_working_hours_apply")
    def api_working_hours_apply(day: str):
        policies = service.apply_to_all(_weekday(day))
        return jsonify({
            "success": True,
            "version": service.version,
            "days": [policy_to_dict(p) for p in policies],
        })
