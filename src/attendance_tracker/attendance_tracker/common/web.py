from __future__ import annotations

import logging
from datetime import datetime
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import StoreError, ValidationError
from .validators import require_month, require_year

logger = logging.getLogger(__name__)


def current_employee_id() -> str:
    return str(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role", Role.EMPLOYEE.value))


def login_required(view):
    """Identity is established by the external auth provider before we see the request."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please sign in to continue"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "message": "You do not have permission"}), 403
        return view(*args, **kwargs)

    return wrapper


def period_from_args(now: datetime) -> tuple[int, int]:
    """``?month=&year=`` query args, defaulting to the current month."""
    month_s: Optional[str] = request.args.get("month")
    year_s: Optional[str] = request.args.get("year")
    try:
        month = require_month(int(month_s)) if month_s else now.month
        year = require_year(int(year_s)) if year_s else now.year
    except ValueError as e:
        raise ValidationError(f"Invalid period: {month_s!r}/{year_s!r}") from e
    return month, year


def store_failure(action: str, error: StoreError):
    logger.warning("%s failed: %s", action, error)
    return jsonify({
        "success": False,
        "retryable": True,
        "message": f"Failed to {action}. Please check your connection and try again.",
    }), 503
