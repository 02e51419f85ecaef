"""Conciliación por franja: una glucometría por franja y día (gana la última)."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from glucemia_xp.model import DailySlotMap, GlucoseRecord


def as_day(value: date | datetime) -> date:
    """Calendar day of a date or datetime (no timezone conversion)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _id_key(record_id: str) -> tuple[int, int, str]:
    # Numeric ids compare as numbers ("10" > "9") and sort before other ids.
    if record_id.isdecimal():
        return (0, int(record_id), "")
    return (1, 0, record_id)


def _record_key(record: GlucoseRecord) -> tuple[datetime, tuple[int, int, str]]:
    # Same timestamp: the greater id wins, whatever the input order.
    return (record.recorded_at, _id_key(str(record.id)))


def latest_per_slot(records: Iterable[GlucoseRecord]) -> DailySlotMap:
    """Keep, for each slot, the record with the latest ``recorded_at``.

    Records without a slot are ignored.
    """
    out: DailySlotMap = {}
    for record in records:
        if record.slot is None:
            continue
        current = out.get(record.slot)
        if current is None or _record_key(record) > _record_key(current):
            out[record.slot] = record
    return out


def merge_by_date(
    records: Iterable[GlucoseRecord], day: date | datetime
) -> DailySlotMap:
    """Reduce the readings of one calendar day to at most one per slot.

    Args:
        records: Unsorted readings of any dates.
        day: Target calendar day; the time of day is ignored.

    Returns:
        Mapping slot -> latest record of that slot on ``day``.
    """
    target = as_day(day)
    return latest_per_slot(r for r in records if r.recorded_at.date() == target)


def merge_by_range(
    records: Iterable[GlucoseRecord],
    start: date | datetime,
    end: date | datetime,
) -> list[GlucoseRecord]:
    """Return every reading from start-of-day(start) to end-of-day(end).

    Readings are not slot-reduced and come sorted ascending by time.
    """
    first = as_day(start)
    last = as_day(end)
    selected = [r for r in records if first <= r.recorded_at.date() <= last]
    return sorted(selected, key=_record_key)
