from __future__ import annotations

from typing import Sequence

from .aggregator import filter_month
from .model import DailySummary, MonthlyRollup


def build_monthly_rollup(summaries: Sequence[DailySummary], *, month: int, year: int) -> MonthlyRollup:
    """Totals over the days of ``month``/``year`` that have sessions.

    Days without sessions are not padded in, so ``total_days`` counts worked
    days only.
    """

    days = filter_month(summaries, month=month, year=year)
    total_minutes = sum(d.total_minutes for d in days)
    total_days = len(days)
    return MonthlyRollup(
        month=int(month),
        year=int(year),
        total_minutes=total_minutes,
        total_days=total_days,
        avg_minutes_per_day=(total_minutes / total_days) if total_days else 0.0,
        total_sessions=sum(d.sessions_count for d in days),
        days=tuple(days),
    )
