"""Racha de días consecutivos con glucometrías registradas."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from glucemia_xp.model import GlucoseRecord
from glucemia_xp.slots import as_day

MAX_LOOKBACK_DAYS = 365


def compute_streak(
    records: Iterable[GlucoseRecord],
    today: date | datetime,
    min_records_per_day: int = 1,
) -> int:
    """Count consecutive logged days walking back from ``today``.

    A day counts when it holds at least ``min_records_per_day`` readings.
    ``today`` itself may still be empty without breaking the streak; the
    first empty day before it ends the count.
    """
    per_day = Counter(r.recorded_at.date() for r in records)
    start = as_day(today)
    streak = 0
    for offset in range(MAX_LOOKBACK_DAYS):
        day = start - timedelta(days=offset)
        if per_day[day] >= min_records_per_day:
            streak += 1
        elif offset > 0:
            break
    return streak
