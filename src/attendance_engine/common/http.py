from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from flask import Flask, jsonify, request

from ..core.exceptions import (
    CrossDayCheckoutError,
    DomainError,
    DuplicateSessionError,
    OpenSessionConflictError,
    SessionAlreadyClosedError,
    SessionNotFoundError,
    StorageUnavailableError,
    ValidationError,
    WorkerNotFoundError,
)
from .datetime_utils import parse_iso_date, parse_month

logger = logging.getLogger(__name__)

_CONFLICTS = (DuplicateSessionError, OpenSessionConflictError, CrossDayCheckoutError, SessionAlreadyClosedError)


def status_code_for(exc: DomainError) -> int:
    if isinstance(exc, (SessionNotFoundError, WorkerNotFoundError)):
        return 404
    if isinstance(exc, _CONFLICTS):
        return 409
    if isinstance(exc, ValidationError):
        return 400
    return 422


def register_error_handlers(app: Flask) -> None:
    """Map domain errors to JSON responses naming the conflicting dates/ids."""

    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        payload = {"success": False, **exc.to_dict()}
        return jsonify(payload), status_code_for(exc)

    @app.errorhandler(StorageUnavailableError)
    def _storage_error(exc: StorageUnavailableError):
        logger.error("Storage unavailable: %s", exc)
        return jsonify({
            "success": False,
            "error": exc.code,
            "message": "Storage is temporarily unavailable, please retry",
            "retryable": True,
        }), 503


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", field="body")
    return data


def arg_date(name: str, default: Optional[date] = None) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be formatted as YYYY-MM-DD", field=name)


def arg_month(default: date) -> date:
    value = request.args.get("month")
    return parse_month(value) if value else default.replace(day=1)


def parse_datetime(value, field_name: str) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO-8601 datetime", field=field_name)
