from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Sequence

from ..common.datetime_utils import in_month
from .model import AttendanceSession, DailySummary


def group_by_date(sessions: Iterable[AttendanceSession], *, now: datetime) -> List[DailySummary]:
    """Group one employee's sessions into per-day summaries.

    Groups on the stored ``work_date``. Open sessions contribute their live
    elapsed minutes as of ``now``, so the result must not be reused once the
    clock has moved. Days come back most recent first; sessions inside a day
    in check-in order.
    """

    grouped: Dict[date, List[AttendanceSession]] = defaultdict(list)
    for s in sessions:
        grouped[s.work_date].append(s)

    summaries = []
    for work_date, day_sessions in grouped.items():
        day_sessions.sort(key=lambda s: s.check_in_time)
        summaries.append(
            DailySummary(
                work_date=work_date,
                sessions=tuple(day_sessions),
                total_minutes=sum(s.elapsed_minutes(now) for s in day_sessions),
                is_open_today=any(s.is_open for s in day_sessions),
            )
        )

    summaries.sort(key=lambda d: d.work_date, reverse=True)
    return summaries


def filter_month(summaries: Sequence[DailySummary], *, month: int, year: int) -> List[DailySummary]:
    return [d for d in summaries if in_month(d.work_date, month=month, year=year)]


def daily_summaries(
    sessions: Iterable[AttendanceSession],
    *,
    month: int,
    year: int,
    now: datetime,
) -> List[DailySummary]:
    return filter_month(group_by_date(sessions, now=now), month=month, year=year)
