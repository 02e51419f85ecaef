"""Sistema de XP diario: franjas completadas, tiempo en rango, bienestar y racha."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from glucemia_xp.model import (
    DailySlotMap,
    GlucoseRecord,
    GlucoseSlot,
    LevelInfo,
    XPBreakdown,
    XPResult,
)
from glucemia_xp.slots import latest_per_slot
from glucemia_xp.stats import round_half_up
from glucemia_xp.status import is_in_range

TOTAL_SLOTS = len(GlucoseSlot)
MIN_REQUIRED_SLOTS = 2

FIRST_SLOT_XP = 20
SECOND_SLOT_XP = 20
EXTRA_SLOT_XP = 5
IN_RANGE_BONUS_XP = 30
SLEEP_LOG_XP = 5
STRESS_LOG_XP = 5

# Streak bonus, in percent of base XP per streak day.
STREAK_BONUS_PERCENT = 3

# Two required slots + full in-range bonus + both wellness logs.
MAX_DAILY_XP = (
    FIRST_SLOT_XP + SECOND_SLOT_XP + IN_RANGE_BONUS_XP + SLEEP_LOG_XP + STRESS_LOG_XP
)

# (min, max, title); max None is open-ended.
XP_LEVELS: tuple[tuple[int, int | None, str], ...] = (
    (0, 299, "Principiante"),
    (300, 599, "En Progreso"),
    (600, 899, "Aprendiz Avanzado"),
    (900, 1199, "Experto en Glucemia"),
    (1200, None, "Maestro del Control"),
)
_OPEN_LEVEL_SPAN = 300


def slots_xp(slots_completed: int) -> tuple[int, int]:
    """Return (base, extra) XP for the number of completed slots.

    The first two slots are worth 20 each; every slot beyond the minimum
    adds 5.
    """
    base = 0
    if slots_completed >= 1:
        base += FIRST_SLOT_XP
    if slots_completed >= 2:
        base += SECOND_SLOT_XP
    extra = max(slots_completed - MIN_REQUIRED_SLOTS, 0) * EXTRA_SLOT_XP
    return base, extra


def in_range_xp(values: Sequence[float]) -> tuple[float, int]:
    """Return (in-range percent, XP) for the day's readings."""
    if not values:
        return 0.0, 0
    in_range = sum(1 for v in values if is_in_range(v))
    percent = in_range / len(values) * 100
    return percent, int(round_half_up(percent / 100 * IN_RANGE_BONUS_XP))


def wellness_xp(has_sleep_logged: bool, has_stress_logged: bool) -> int:
    xp = 0
    if has_sleep_logged:
        xp += SLEEP_LOG_XP
    if has_stress_logged:
        xp += STRESS_LOG_XP
    return xp


def streak_multiplier(streak_days: int) -> float:
    """+3% per streak day, 1.0 without a streak; never decreases."""
    return _streak_percent(streak_days) / 100


def compute_daily_xp(
    today_records: Mapping[GlucoseSlot, GlucoseRecord] | Sequence[GlucoseRecord],
    *,
    has_sleep_logged: bool,
    has_stress_logged: bool,
    streak_days: int,
    total_accumulated_xp: int = 0,
) -> XPResult:
    """Score one day.

    Args:
        today_records: The day's slot map, or its raw readings (collapsed to
            one per slot, latest wins).
        has_sleep_logged: Whether a sleep entry exists for the day.
        has_stress_logged: Whether a stress entry exists for the day.
        streak_days: Current streak length.
        total_accumulated_xp: Accepted for level lookups by the caller; it
            does not change the result.

    Returns:
        XPResult with ``final_xp = round(base_xp * streak_multiplier)``.
    """
    slot_map = _as_slot_map(today_records)

    slots_completed = len(slot_map)
    base_slots, extra_slots = slots_xp(slots_completed)
    percent, range_xp = in_range_xp([r.value for r in slot_map.values()])
    wellness = wellness_xp(has_sleep_logged, has_stress_logged)

    breakdown = XPBreakdown(
        slots_xp=base_slots + extra_slots,
        base_slots_xp=base_slots,
        extra_slots_xp=extra_slots,
        in_range_xp=range_xp,
        wellness_xp=wellness,
    )
    base_xp = min(breakdown.slots_xp + range_xp + wellness, MAX_DAILY_XP)
    multiplier = streak_multiplier(streak_days)

    return XPResult(
        base_xp=base_xp,
        final_xp=(base_xp * _streak_percent(streak_days) + 50) // 100,
        breakdown=breakdown,
        streak_days=streak_days,
        streak_multiplier=multiplier,
        slots_completed=slots_completed,
        total_slots=TOTAL_SLOTS,
        min_required_slots=MIN_REQUIRED_SLOTS,
        has_min_slots=slots_completed >= MIN_REQUIRED_SLOTS,
        in_range_percent=percent,
        has_sleep_logged=has_sleep_logged,
        has_stress_logged=has_stress_logged,
        max_daily_xp=MAX_DAILY_XP,
    )


def current_level(total_xp: int) -> LevelInfo:
    """Locate an accumulated XP total on the level ladder."""
    for number, (low, high, title) in enumerate(XP_LEVELS, start=1):
        if high is not None and total_xp > high:
            continue
        end = high if high is not None else low + _OPEN_LEVEL_SPAN
        span = end - low
        xp_in_level = total_xp - low
        return LevelInfo(
            level=number,
            title=title,
            current_level_xp=xp_in_level,
            next_level_threshold=span,
            progress_percent=min(100.0, xp_in_level / span * 100),
        )
    raise AssertionError("unreachable: last level is open-ended")


def _as_slot_map(
    records: Mapping[GlucoseSlot, GlucoseRecord] | Sequence[GlucoseRecord],
) -> DailySlotMap:
    if isinstance(records, Mapping):
        return dict(records)
    return latest_per_slot(records)


def _streak_percent(streak_days: int) -> int:
    # Integer percent keeps exact halves (50 * 115% = 57.5) rounding up.
    return 100 + max(streak_days, 0) * STREAK_BONUS_PERCENT
