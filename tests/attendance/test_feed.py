from __future__ import annotations

from datetime import datetime

from src.attendance_tracker.attendance_tracker.attendance.feed import SessionFeed
from tests.fakes import make_session


def test_subscribe_delivers_current_snapshot_immediately():
    feed = SessionFeed()
    rows = [make_session(1, check_in=datetime(2026, 3, 2, 9, 0))]
    received = []

    feed.subscribe("emp-1", lambda: rows, received.append)

    assert received == [tuple(rows)]


def test_publish_reloads_only_that_employee():
    feed = SessionFeed()
    rows = {"emp-1": [], "emp-2": []}
    got_1, got_2 = [], []
    feed.subscribe("emp-1", lambda: rows["emp-1"], got_1.append)
    feed.subscribe("emp-2", lambda: rows["emp-2"], got_2.append)

    rows["emp-1"] = [make_session(1, check_in=datetime(2026, 3, 2, 9, 0))]
    feed.publish("emp-1")

    assert len(got_1) == 2
    assert got_1[-1][0].session_id == 1
    assert len(got_2) == 1


def test_unsubscribe_stops_delivery():
    feed = SessionFeed()
    received = []
    unsubscribe = feed.subscribe("emp-1", lambda: [], received.append)

    unsubscribe()
    unsubscribe()
    feed.publish("emp-1")

    assert len(received) == 1
    assert feed.subscriber_count("emp-1") == 0


def test_loader_failure_goes_to_error_callback():
    feed = SessionFeed()
    updates, errors = [], []

    def broken():
        raise RuntimeError("offline")

    feed.subscribe("emp-1", broken, updates.append, errors.append)

    assert updates == []
    assert isinstance(errors[0], RuntimeError)


def test_loader_failure_without_error_callback_is_logged(caplog):
    feed = SessionFeed()

    def broken():
        raise RuntimeError("offline")

    feed.subscribe("emp-1", broken, lambda rows: None)

    assert "Session feed reload failed" in caplog.text
