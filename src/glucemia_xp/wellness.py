"""Banderas de bienestar (sueño/estrés) para el cálculo de XP."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from glucemia_xp.model import WellnessEntry, WellnessKind
from glucemia_xp.slots import as_day


def has_entry_on(
    entries: Iterable[WellnessEntry], kind: WellnessKind, day: date | datetime
) -> bool:
    """Return True if an entry of ``kind`` was logged on the calendar day."""
    target = as_day(day)
    return any(e.kind == kind and e.recorded_at.date() == target for e in entries)
