from __future__ import annotations

from datetime import datetime

from flask import Flask, jsonify, request

from ..common.duration import format_clock, format_duration, format_live_seconds
from ..common.web import current_employee_id, login_required, period_from_args, store_failure
from ..core.exceptions import StoreError, ValidationError
from ..container import Container
from .geolocation import provider_from_payload
from .model import AttendanceSession, DailySummary, DayEvaluation


def _session_to_ui(s: AttendanceSession, now: datetime) -> dict:
    return {
        "session_id": s.session_id,
        "date": s.work_date.strftime("%Y-%m-%d"),
        "check_in": s.check_in_time.strftime("%H:%M:%S"),
        "check_out": s.check_out_time.strftime("%H:%M:%S") if s.check_out_time else "-",
        "is_open": s.is_open,
        "duration": format_duration(s.elapsed_minutes(now)),
        "location": (
            {"latitude": s.location.latitude, "longitude": s.location.longitude} if s.location else None
        ),
    }


def _day_to_ui(d: DailySummary, ev: DayEvaluation, now: datetime) -> dict:
    return {
        "date": d.work_date.strftime("%Y-%m-%d"),
        "sessions": [_session_to_ui(s, now) for s in d.sessions],
        "sessions_count": d.sessions_count,
        "total_minutes": d.total_minutes,
        "total": format_duration(d.total_minutes),
        "is_open_today": d.is_open_today,
        "expected_hours": ev.expected_hours,
        "completion_percentage": round(ev.completion_percentage, 1),
        "status": ev.status.value,
        "day_type": ev.day_type.value,
    }


def register(app: Flask, container: Container) -> None:
    def _status_payload(tracker, now: datetime) -> dict:
        current = tracker.current_session
        seconds = tracker.current_session_elapsed_seconds(now)
        return {
            "is_checked_in": tracker.is_checked_in,
            "current_session": _session_to_ui(current, now) if current else None,
            "elapsed_minutes": tracker.current_session_elapsed(now),
            "working_time": format_clock(seconds),
        }

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @login_required
    def attendance_status():
        try:
            tracker = container.trackers.get(current_employee_id())
        except StoreError as e:
            return store_failure("load attendance", e)
        return jsonify(_status_payload(tracker, container.clock()))

    @app.route("/api/attendance/live", methods=["GET"], endpoint="attendance_live")
    @login_required
    def attendance_live():
        """Polled every second by the dashboard clock; never reads the store."""
        try:
            tracker = container.trackers.get(current_employee_id())
        except StoreError as e:
            return store_failure("load attendance", e)
        seconds = tracker.current_session_elapsed_seconds(container.clock())
        return jsonify({
            "is_checked_in": tracker.is_checked_in,
            "elapsed_seconds": seconds,
            "working_time": format_clock(seconds),
            "live_duration": format_live_seconds(seconds),
        })

    @app.route("/checkin", methods=["POST"], endpoint="checkin")
    @login_required
    def checkin():
        payload = request.get_json(silent=True) or request.form.to_dict()
        try:
            tracker = container.trackers.get(current_employee_id())
            tracker.check_in(location_provider=provider_from_payload(payload))
        except StoreError as e:
            return store_failure("check in", e)
        return jsonify({"success": True, **_status_payload(tracker, container.clock())})

    @app.route("/checkout", methods=["POST"], endpoint="checkout")
    @login_required
    def checkout():
        try:
            tracker = container.trackers.get(current_employee_id())
            closed = tracker.check_out()
        except StoreError as e:
            return store_failure("check out", e)

        now = container.clock()
        body = {"success": True, **_status_payload(tracker, now)}
        if closed is not None:
            body["closed_session"] = _session_to_ui(closed, now)
        return jsonify(body)

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def attendance_summary():
        now = container.clock()
        try:
            month, year = period_from_args(now)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400

        employee_id = current_employee_id()
        try:
            tracker = container.trackers.get(employee_id)
            employee = container.employees_repo.get_by_id(employee_id)
        except StoreError as e:
            return store_failure("load attendance", e)

        schedule = employee.schedule if employee else None
        days = tracker.daily_summaries(month, year, now=now)
        evaluations = tracker.evaluate_days(month, year, schedule, now=now)
        rollup = tracker.monthly_rollup(month, year, now=now)

        return jsonify({
            "month": month,
            "year": year,
            "days": [_day_to_ui(d, ev, now) for d, ev in zip(days, evaluations)],
            "rollup": {
                "total_minutes": rollup.total_minutes,
                "total_hours": format_duration(rollup.total_minutes),
                "total_days": rollup.total_days,
                "avg_minutes_per_day": round(rollup.avg_minutes_per_day, 1),
                "avg_hours_per_day": format_duration(int(rollup.avg_minutes_per_day)),
                "total_sessions": rollup.total_sessions,
            },
            "stale": tracker.last_feed_error is not None,
        })

    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        now = container.clock()
        try:
            tracker = container.trackers.get(current_employee_id())
        except StoreError as e:
            return store_failure("load attendance", e)

        history = tracker.all_daily_summaries(now=now)[:7]
        return jsonify({
            **_status_payload(tracker, now),
            "recent_days": [
                {
                    "date": d.work_date.strftime("%Y-%m-%d"),
                    "sessions_count": d.sessions_count,
                    "total": format_duration(d.total_minutes),
                    "is_open_today": d.is_open_today,
                }
                for d in history
            ],
        })
