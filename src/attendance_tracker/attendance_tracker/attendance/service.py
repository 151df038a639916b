from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..common.datetime_utils import now_local
from ..common.duration import minutes_between, seconds_between
from ..core.constants import DEFAULT_GEOLOCATION_TIMEOUT_SECONDS
from ..core.exceptions import OpenSessionConflict, SessionAlreadyClosed
from ..employees.model import WorkingHoursSchedule
from .aggregator import daily_summaries, group_by_date
from .evaluator import ScheduleEvaluator
from .geolocation import GeolocationProvider, acquire_location
from .model import AttendanceSession, DailySummary, DayEvaluation, MonthlyRollup
from .repository import AttendanceSessionStore, Unsubscribe
from .rollup import build_monthly_rollup

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class AttendanceTracker:
    """Check-in/check-out state machine for a single employee.

    States are ``idle`` (no current session) and ``open``. Calling a
    transition from the wrong state is a no-op. Store errors propagate to the
    caller unchanged and leave the in-memory state as it was, so the user can
    simply retry.
    """

    def __init__(
        self,
        employee_id: str,
        store: AttendanceSessionStore,
        *,
        clock: Clock = now_local,
        geolocation_timeout: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
        evaluator: Optional[ScheduleEvaluator] = None,
    ):
        self._employee_id = str(employee_id)
        self._store = store
        self._clock = clock
        self._geolocation_timeout = float(geolocation_timeout)
        self._evaluator = evaluator or ScheduleEvaluator()

        self._lock = threading.RLock()
        self._current: Optional[AttendanceSession] = None
        self._sessions: Tuple[AttendanceSession, ...] = ()
        self._unsubscribe: Optional[Unsubscribe] = None
        self._last_feed_error: Optional[Exception] = None

    @property
    def employee_id(self) -> str:
        return self._employee_id

    @property
    def is_checked_in(self) -> bool:
        return self._current is not None

    @property
    def current_session(self) -> Optional[AttendanceSession]:
        return self._current

    @property
    def sessions(self) -> Tuple[AttendanceSession, ...]:
        return self._sessions

    @property
    def last_feed_error(self) -> Optional[Exception]:
        return self._last_feed_error

    # Lifecycle

    def restore(self) -> Optional[AttendanceSession]:
        """Pick up a session left open by an earlier visit or another device."""
        open_session = self._store.get_open_session(self._employee_id)
        with self._lock:
            self._current = open_session
        return open_session

    def start(self) -> None:
        with self._lock:
            if self._unsubscribe is not None:
                return
            self._unsubscribe = self._store.subscribe_sessions(
                self._employee_id,
                self.replace_sessions,
                self._on_feed_error,
            )

    def stop(self) -> None:
        with self._lock:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    # Transitions

    def check_in(
        self,
        *,
        location_provider: Optional[GeolocationProvider] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceSession:
        with self._lock:
            if self._current is not None:
                logger.debug("Check-in ignored: session %s already open", self._current.session_id)
                return self._current

            existing = self._store.get_open_session(self._employee_id)
            if existing is not None:
                return self._adopt(existing)

            now = now or self._clock()
            location = acquire_location(location_provider, timeout=self._geolocation_timeout)

            try:
                session_id = self._store.create_session(
                    employee_id=self._employee_id,
                    check_in_time=now,
                    work_date=now.date(),
                    location=location,
                )
            except OpenSessionConflict:
                existing = self._store.get_open_session(self._employee_id)
                if existing is None:
                    raise
                return self._adopt(existing)

            self._current = AttendanceSession(
                session_id=session_id,
                employee_id=self._employee_id,
                work_date=now.date(),
                check_in_time=now,
                location=location,
            )
            logger.info(
                "Checked in",
                extra={"employee_id": self._employee_id, "session_id": session_id},
            )
            return self._current

    def check_out(self, *, now: Optional[datetime] = None) -> Optional[AttendanceSession]:
        """Close the open session, wherever it was started.

        The in-memory state may lag behind writes made by other processes, so
        an idle tracker asks the store before treating check-out as a no-op,
        and a session closed elsewhere is resynced from the store.
        """

        with self._lock:
            current = self._current or self._store.get_open_session(self._employee_id)
            if current is None:
                logger.debug("Check-out ignored: employee %s has no open session", self._employee_id)
                return None

            now = now or self._clock()
            try:
                return self._close(current, now)
            except SessionAlreadyClosed:
                logger.info(
                    "Session was closed on another device",
                    extra={"employee_id": self._employee_id, "session_id": current.session_id},
                )
                self._current = self._store.get_open_session(self._employee_id)
                if self._current is None:
                    return None
                return self._close(self._current, now)

    def _close(self, current: AttendanceSession, now: datetime) -> AttendanceSession:
        # Clock skew between devices must not produce a negative span.
        check_out_time = max(now, current.check_in_time)
        duration = minutes_between(current.check_in_time, check_out_time)

        self._store.update_session(
            session_id=current.session_id,
            check_out_time=check_out_time,
            duration_minutes=duration,
        )

        self._current = None
        logger.info(
            "Checked out after %d minutes",
            duration,
            extra={"employee_id": self._employee_id, "session_id": current.session_id},
        )
        return replace(current, check_out_time=check_out_time, duration_minutes=duration)

    def _adopt(self, session: AttendanceSession) -> AttendanceSession:
        logger.info(
            "Adopted open session started elsewhere",
            extra={"employee_id": self._employee_id, "session_id": session.session_id},
        )
        self._current = session
        return session

    # Subscription

    def replace_sessions(self, sessions: Sequence[AttendanceSession]) -> None:
        """Swap in a full snapshot from the store; never merged with the old one."""
        snapshot = tuple(s for s in sessions if s.employee_id == self._employee_id)
        with self._lock:
            self._sessions = snapshot
            self._last_feed_error = None

            open_sessions = [s for s in snapshot if s.is_open]
            if open_sessions:
                self._current = max(open_sessions, key=lambda s: s.check_in_time)
            elif self._current is not None and any(s.session_id == self._current.session_id for s in snapshot):
                # Closed from another device.
                self._current = None

    def _on_feed_error(self, error: Exception) -> None:
        logger.warning("Session feed failed; keeping last snapshot: %s", error)
        self._last_feed_error = error

    # Read side

    def current_session_elapsed(self, now: Optional[datetime] = None) -> int:
        """Whole minutes since check-in, recomputed on every call."""
        current = self._current
        if current is None:
            return 0
        return minutes_between(current.check_in_time, now or self._clock())

    def current_session_elapsed_seconds(self, now: Optional[datetime] = None) -> int:
        current = self._current
        if current is None:
            return 0
        return seconds_between(current.check_in_time, now or self._clock())

    def all_daily_summaries(self, *, now: Optional[datetime] = None) -> List[DailySummary]:
        return group_by_date(self._sessions, now=now or self._clock())

    def daily_summaries(self, month: int, year: int, *, now: Optional[datetime] = None) -> List[DailySummary]:
        return daily_summaries(self._sessions, month=month, year=year, now=now or self._clock())

    def monthly_rollup(self, month: int, year: int, *, now: Optional[datetime] = None) -> MonthlyRollup:
        return build_monthly_rollup(self.daily_summaries(month, year, now=now), month=month, year=year)

    def evaluate_days(
        self,
        month: int,
        year: int,
        schedule: Optional[WorkingHoursSchedule],
        *,
        now: Optional[datetime] = None,
    ) -> List[DayEvaluation]:
        return [self._evaluator.evaluate_day(d, schedule) for d in self.daily_summaries(month, year, now=now)]


class TrackerRegistry:
    """One tracker per employee, created lazily and kept subscribed."""

    def __init__(
        self,
        store: AttendanceSessionStore,
        *,
        clock: Clock = now_local,
        geolocation_timeout: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
        evaluator: Optional[ScheduleEvaluator] = None,
    ):
        self._store = store
        self._clock = clock
        self._geolocation_timeout = geolocation_timeout
        self._evaluator = evaluator or ScheduleEvaluator()
        self._lock = threading.Lock()
        self._trackers: Dict[str, AttendanceTracker] = {}

    def get(self, employee_id: str) -> AttendanceTracker:
        key = str(employee_id)
        with self._lock:
            tracker = self._trackers.get(key)
            if tracker is not None:
                return tracker

            tracker = AttendanceTracker(
                key,
                self._store,
                clock=self._clock,
                geolocation_timeout=self._geolocation_timeout,
                evaluator=self._evaluator,
            )
            tracker.restore()
            tracker.start()
            self._trackers[key] = tracker
            return tracker

    def close_all(self) -> None:
        with self._lock:
            trackers = list(self._trackers.values())
            self._trackers.clear()
        for tracker in trackers:
            tracker.stop()
