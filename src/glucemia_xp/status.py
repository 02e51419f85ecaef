"""Clasificación clínica de glucometrías y tablas de etiquetas."""

from __future__ import annotations

from glucemia_xp.model import GlucoseSlot, GlucoseStatus

CRITICAL_LOW_BELOW = 54
LOW_BELOW = 70
HIGH_ABOVE = 180
CRITICAL_HIGH_ABOVE = 250

# Time-in-range band (mg/dL, both ends inclusive).
IN_RANGE_MIN = 70
IN_RANGE_MAX = 180

SLOT_LABELS: dict[GlucoseSlot, str] = {
    GlucoseSlot.BEFORE_BREAKFAST: "Antes del desayuno",
    GlucoseSlot.AFTER_BREAKFAST: "Después del desayuno",
    GlucoseSlot.BEFORE_LUNCH: "Antes del almuerzo",
    GlucoseSlot.AFTER_LUNCH: "Después del almuerzo",
    GlucoseSlot.BEFORE_DINNER: "Antes de la cena",
    GlucoseSlot.AFTER_DINNER: "Después de la cena",
}

STATUS_LABELS: dict[GlucoseStatus, str] = {
    GlucoseStatus.CRITICAL_LOW: "Muy baja",
    GlucoseStatus.LOW: "Baja",
    GlucoseStatus.NORMAL: "Normal",
    GlucoseStatus.HIGH: "Alta",
    GlucoseStatus.CRITICAL_HIGH: "Muy alta",
}


def classify(value: float) -> GlucoseStatus:
    """Map a reading (mg/dL) to its clinical category.

    Thresholds are evaluated in order; any real value is accepted.
    """
    if value < CRITICAL_LOW_BELOW:
        return GlucoseStatus.CRITICAL_LOW
    if value < LOW_BELOW:
        return GlucoseStatus.LOW
    if value <= HIGH_ABOVE:
        return GlucoseStatus.NORMAL
    if value <= CRITICAL_HIGH_ABOVE:
        return GlucoseStatus.HIGH
    return GlucoseStatus.CRITICAL_HIGH


def is_in_range(value: float) -> bool:
    """Return True when the reading counts towards time-in-range."""
    return IN_RANGE_MIN <= value <= IN_RANGE_MAX


def parse_slot(raw: object) -> GlucoseSlot | None:
    """Parse a slot key or its Spanish label (case-insensitive); None if unknown."""
    if raw is None:
        return None
    text = str(raw).strip().lower()
    if not text:
        return None
    for slot in GlucoseSlot:
        if text == slot.value or text == SLOT_LABELS[slot].lower():
            return slot
    return None
