from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from .model import AttendanceSession
from .repository import ErrorCallback, SessionsCallback, Unsubscribe

logger = logging.getLogger(__name__)

Loader = Callable[[], Sequence[AttendanceSession]]


@dataclass(eq=False)
class _Subscription:
    loader: Loader
    on_update: SessionsCallback
    on_error: Optional[ErrorCallback]


class SessionFeed:
    """In-process change feed for session stores.

    Each subscriber owns a loader bound to its filter. ``publish`` reloads
    the full set for every subscriber of that employee and hands it over as a
    snapshot; subscribers never see partial merges.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subs: Dict[str, List[_Subscription]] = {}

    def subscribe(
        self,
        employee_id: str,
        loader: Loader,
        on_update: SessionsCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        sub = _Subscription(loader=loader, on_update=on_update, on_error=on_error)
        with self._lock:
            self._subs.setdefault(str(employee_id), []).append(sub)

        self._deliver(sub)

        def unsubscribe() -> None:
            with self._lock:
                subs = self._subs.get(str(employee_id), [])
                if sub in subs:
                    subs.remove(sub)
                if not subs:
                    self._subs.pop(str(employee_id), None)

        return unsubscribe

    def publish(self, employee_id: str) -> None:
        with self._lock:
            subs = list(self._subs.get(str(employee_id), []))
        for sub in subs:
            self._deliver(sub)

    def subscriber_count(self, employee_id: str) -> int:
        with self._lock:
            return len(self._subs.get(str(employee_id), []))

    @staticmethod
    def _deliver(sub: _Subscription) -> None:
        try:
            snapshot = tuple(sub.loader())
        except Exception as e:
            if sub.on_error is None:
                logger.exception("Session feed reload failed")
                return
            sub.on_error(e)
            return
        sub.on_update(snapshot)
