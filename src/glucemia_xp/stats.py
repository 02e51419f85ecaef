"""Estadísticas de período: promedio, dispersión, tiempo en rango y cobertura."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import date, datetime

import pandas as pd

from glucemia_xp.model import GlucoseRecord, PeriodStats
from glucemia_xp.slots import as_day
from glucemia_xp.status import IN_RANGE_MAX, IN_RANGE_MIN

_FRAME_COLUMNS = ["id", "value", "recorded_at", "date", "slot", "notes"]


def round_half_up(value: float) -> float:
    """Round to the nearest integer, halves going up (NaN passes through)."""
    if math.isnan(value):
        return value
    return math.floor(value + 0.5)


def records_to_frame(records: Sequence[GlucoseRecord]) -> pd.DataFrame:
    """Convert readings to a DataFrame sorted by time.

    Columns: id, value, recorded_at, date, slot, notes.
    """
    rows = [
        {
            "id": r.id,
            "value": r.value,
            "recorded_at": r.recorded_at,
            "date": r.recorded_at.date(),
            "slot": r.slot.value if r.slot is not None else None,
            "notes": r.notes,
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=_FRAME_COLUMNS)
    if df.empty:
        return df
    return df.sort_values("recorded_at", kind="stable").reset_index(drop=True)


def total_days(start: date | datetime, end: date | datetime) -> int:
    """Inclusive number of calendar days in [start, end].

    Raises:
        ValueError: If ``end`` falls before ``start``.
    """
    days = (as_day(end) - as_day(start)).days + 1
    if days < 1:
        raise ValueError(f"End date {as_day(end)} precedes start date {as_day(start)}")
    return days


def compute_period_stats(
    records: Sequence[GlucoseRecord],
    start: date | datetime,
    end: date | datetime,
) -> PeriodStats | None:
    """Aggregate readings over a date window.

    The records are not re-filtered to ``[start, end]``: ``days_with_records``
    counts the distinct days present in ``records`` while ``total_days`` comes
    from the window. Callers wanting comparable figures pass a list already
    cut with :func:`glucemia_xp.slots.merge_by_range`.

    Args:
        records: Readings to aggregate.
        start: First day of the window.
        end: Last day of the window (inclusive).

    Returns:
        PeriodStats, or None when ``records`` is empty.
    """
    if not records:
        return None

    days = total_days(start, end)
    frame = records_to_frame(records)
    values = frame["value"]
    count = len(values)

    mean = float(values.mean(skipna=False))
    std = float(values.std(ddof=0, skipna=False))
    in_range_count = int(values.between(IN_RANGE_MIN, IN_RANGE_MAX).sum())
    days_with_records = int(frame["date"].nunique())

    return PeriodStats(
        count=count,
        avg=round_half_up(mean),
        min=_scalar(values.min(skipna=False)),
        max=_scalar(values.max(skipna=False)),
        in_range_count=in_range_count,
        in_range_percent=round_half_up(in_range_count / count * 100),
        total_days=days,
        days_with_records=days_with_records,
        days_with_records_percent=round_half_up(days_with_records / days * 100),
        avg_takes_per_day=round_half_up(count / days * 10) / 10,
        std_dev=round_half_up(std),
    )


def _scalar(value: object) -> float:
    if hasattr(value, "item"):
        return value.item()  # type: ignore[no-any-return]
    return value  # type: ignore[return-value]
