from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_tracker.attendance_tracker.container import build_services
from src.attendance_tracker.attendance_tracker.main import create_app
from tests.fakes import make_session


@pytest.fixture
def app(monkeypatch, store, employees, leaves, messages, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_services(
        employees_repo=employees,
        attendance_repo=store,
        leaves_repo=leaves,
        messages_repo=messages,
        geolocation_timeout=0.5,
        clock=clock,
    )
    return create_app(container=container)


def _client(app, user_id="emp-1", role="employee"):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role
    return client


def test_anonymous_requests_are_rejected(app):
    resp = app.test_client().get("/api/attendance/status")

    assert resp.status_code == 401


def test_check_in_then_live_clock_then_check_out(app, clock):
    client = _client(app)

    resp = client.post("/checkin", json={"latitude": 12.97, "longitude": 77.59})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["is_checked_in"] is True
    assert body["current_session"]["location"] == {"latitude": 12.97, "longitude": 77.59}

    clock.advance(minutes=90, seconds=5)
    live = client.get("/api/attendance/live").get_json()
    assert live["elapsed_seconds"] == 90 * 60 + 5
    assert live["working_time"] == "01:30:05"
    assert live["live_duration"] == "1h 30m 5s"

    body = client.post("/checkout").get_json()
    assert body["is_checked_in"] is False
    assert body["closed_session"]["duration"] == "1h 30m"
    assert body["working_time"] == "00:00:00"


def test_check_in_without_location_still_succeeds(app, store):
    resp = _client(app).post("/checkin")

    assert resp.status_code == 200
    [session] = store.sessions.values()
    assert session.location is None


def test_repeated_check_in_keeps_one_session(app, store):
    client = _client(app)

    client.post("/checkin")
    client.post("/checkin")

    assert len(store.sessions) == 1


def test_check_out_closes_a_session_this_process_never_saw_open(app, store):
    client = _client(app)
    assert client.get("/api/attendance/status").get_json()["is_checked_in"] is False
    # Written straight to the rows, as another app instance would.
    store.add(make_session(9, check_in=datetime(2026, 3, 2, 8, 0)))

    body = client.post("/checkout").get_json()

    assert body["is_checked_in"] is False
    assert body["closed_session"]["duration"] == "1h 0m"
    assert not store.sessions[9].is_open


def test_check_out_failure_is_retryable(app, store):
    client = _client(app)
    client.post("/checkin")
    store.fail_writes = True

    resp = client.post("/checkout")

    assert resp.status_code == 503
    assert resp.get_json()["retryable"] is True
    assert client.get("/api/attendance/status").get_json()["is_checked_in"] is True


def test_summary_for_current_month(app, clock):
    client = _client(app)
    client.post("/checkin")
    clock.advance(hours=6)
    client.post("/checkout")

    body = client.get("/api/attendance/summary").get_json()

    assert (body["month"], body["year"]) == (3, 2026)
    [day] = body["days"]
    assert day["total"] == "6h 0m"
    assert day["completion_percentage"] == 75.0
    assert day["status"] == "On Track"
    assert day["day_type"] == "full"
    assert body["rollup"]["total_sessions"] == 1
    assert body["stale"] is False


def test_summary_rejects_bad_period(app):
    resp = _client(app).get("/api/attendance/summary?month=13&year=2026")

    assert resp.status_code == 400


def test_dashboard_lists_recent_days(app, clock):
    client = _client(app)
    client.post("/checkin")
    clock.advance(minutes=30)

    body = client.get("/dashboard").get_json()

    assert body["is_checked_in"] is True
    assert body["recent_days"][0]["total"] == "0h 30m"


def test_admin_report_requires_admin(app):
    assert _client(app).get("/admin/attendance/report").status_code == 403

    resp = _client(app, user_id="adm-1", role="admin").get("/admin/attendance/report?month=3&year=2026")
    body = resp.get_json()
    assert resp.status_code == 200
    assert {r["employee_id"] for r in body["rows"]} == {"emp-1", "adm-1"}


def test_leave_request_flow(app):
    employee = _client(app)
    resp = employee.post(
        "/leaves",
        json={"start_date": "2026-03-09", "end_date": "2026-03-10", "reason": "Medical"},
    )
    assert resp.status_code == 201
    request_id = resp.get_json()["request_id"]

    admin = _client(app, user_id="adm-1", role="admin")
    assert admin.post(f"/admin/leaves/{request_id}/approve").get_json()["success"] is True
    assert admin.post(f"/admin/leaves/{request_id}/reject").status_code == 400

    [mine] = employee.get("/leaves/mine").get_json()["requests"]
    assert mine["status"] == "approved"


def test_leave_request_with_bad_dates(app):
    resp = _client(app).post("/leaves", json={"start_date": "09/03/2026", "end_date": "", "reason": "x"})

    assert resp.status_code == 400


def test_admin_message_reaches_employee_inbox(app):
    admin = _client(app, user_id="adm-1", role="admin")
    resp = admin.post("/admin/messages", json={"recipient_id": "emp-1", "content": "Please update your timesheet"})
    assert resp.status_code == 201
    assert resp.get_json()["sent"] == 1

    employee = _client(app)
    inbox = employee.get("/messages").get_json()
    assert inbox["unread"] == 1
    [msg] = inbox["messages"]
    assert msg["from"] == "Ravi"

    assert employee.post(f"/messages/{msg['message_id']}/read").get_json()["success"] is True
    assert employee.get("/messages").get_json()["unread"] == 0
    assert len(admin.get("/admin/messages").get_json()["messages"]) == 1


def test_messaging_permissions_and_validation(app):
    employee = _client(app)
    assert employee.post("/admin/messages", json={"content": "hi"}).status_code == 403
    assert employee.post("/messages/42/read").status_code == 404

    admin = _client(app, user_id="adm-1", role="admin")
    assert admin.post("/admin/messages", json={"content": "  "}).status_code == 400
    assert admin.post("/admin/messages", json={"recipient_id": "ghost", "content": "hi"}).status_code == 400
