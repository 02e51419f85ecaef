"""Modelos tipados para glucometrías, bienestar y resultados derivados."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal


class GlucoseSlot(str, Enum):
    """The six daily measurement slots, in daily order."""

    BEFORE_BREAKFAST = "before_breakfast"
    AFTER_BREAKFAST = "after_breakfast"
    BEFORE_LUNCH = "before_lunch"
    AFTER_LUNCH = "after_lunch"
    BEFORE_DINNER = "before_dinner"
    AFTER_DINNER = "after_dinner"


class GlucoseStatus(str, Enum):
    """Clinical category of a single reading."""

    CRITICAL_LOW = "critical_low"
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL_HIGH = "critical_high"


@dataclass(frozen=True)
class GlucoseRecord:
    """One glucose reading as returned by the record source."""

    id: str
    value: int
    recorded_at: datetime
    slot: GlucoseSlot | None = None
    notes: str | None = None


WellnessKind = Literal["sleep", "stress"]


@dataclass(frozen=True)
class WellnessEntry:
    """A sleep or stress log entry (only its presence matters for scoring)."""

    kind: WellnessKind
    recorded_at: datetime


DailySlotMap = dict[GlucoseSlot, GlucoseRecord]


@dataclass(frozen=True)
class PeriodStats:
    """Aggregate statistics for a list of readings over a date window."""

    count: int
    avg: float
    min: float
    max: float
    in_range_count: int
    in_range_percent: float
    total_days: int
    days_with_records: int
    days_with_records_percent: float
    avg_takes_per_day: float
    std_dev: float


@dataclass(frozen=True)
class XPBreakdown:
    """Independently computed point buckets of a day."""

    slots_xp: int
    base_slots_xp: int
    extra_slots_xp: int
    in_range_xp: int
    wellness_xp: int


@dataclass(frozen=True)
class XPResult:
    """Daily XP score with its breakdown and the inputs that shaped it."""

    base_xp: int
    final_xp: int
    breakdown: XPBreakdown
    streak_days: int
    streak_multiplier: float
    slots_completed: int
    total_slots: int
    min_required_slots: int
    has_min_slots: bool
    in_range_percent: float
    has_sleep_logged: bool
    has_stress_logged: bool
    max_daily_xp: int


@dataclass(frozen=True)
class LevelInfo:
    """Position of an accumulated XP total on the level ladder."""

    level: int
    title: str
    current_level_xp: int
    next_level_threshold: int
    progress_percent: float
