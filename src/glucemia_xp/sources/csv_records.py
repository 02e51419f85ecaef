"""Lectura de glucometrías y registros de bienestar exportados a CSV."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import cast

import pandas as pd
from dateutil import tz

from glucemia_xp.config import DEFAULT_TZ
from glucemia_xp.model import GlucoseRecord, WellnessEntry, WellnessKind
from glucemia_xp.sources.base import RecordSource, SourcePaths
from glucemia_xp.status import parse_slot

logger = logging.getLogger(__name__)

RECORD_COLUMNS = ["id", "value", "recorded_at", "slot", "notes"]
WELLNESS_KINDS: tuple[WellnessKind, ...] = ("sleep", "stress")


@dataclass(frozen=True)
class CsvRecordPaths(SourcePaths):
    """Path of a glucose records CSV."""

    # root: the CSV file itself


class CsvRecordSource(RecordSource):
    """CSV export with columns id, value, recorded_at, slot, notes.

    Naive timestamps are read as local time in ``timezone``; rows carrying an
    offset are converted to it, so a file may mix both.
    """

    def __init__(self, paths: CsvRecordPaths, timezone: str = DEFAULT_TZ) -> None:
        super().__init__(paths)
        self._tz = tz.gettz(timezone)

    def validate(self) -> None:
        """Validate that the CSV file exists."""
        if not self._paths.root.is_file():
            raise FileNotFoundError(str(self._paths.root))

    def list(self) -> list[GlucoseRecord]:
        """Load every row as a record.

        Raises:
            ValueError: If required columns are missing.
        """
        df = pd.read_csv(self._paths.root, dtype={"id": str})
        df = df.rename(columns={c: c.strip() for c in df.columns})
        missing = [c for c in ("id", "value", "recorded_at") if c not in df.columns]
        if missing:
            raise ValueError(f"Missing columns in {self._paths.root}: {missing}")

        out = [
            _row_to_record(row, self._tz) for row in df.to_dict(orient="records")
        ]
        logger.info("Loaded %d records from %s", len(out), self._paths.root)
        return out


def load_wellness(path: Path, timezone: str = DEFAULT_TZ) -> list[WellnessEntry]:
    """Load a ``kind, recorded_at`` CSV; rows of unknown kind are skipped.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    if not path.is_file():
        raise FileNotFoundError(str(path))
    local_tz = tz.gettz(timezone)
    df = pd.read_csv(path)
    out: list[WellnessEntry] = []
    for row in df.to_dict(orient="records"):
        kind = str(row.get("kind", "")).strip().lower()
        if kind not in WELLNESS_KINDS:
            logger.warning("Skipping wellness row with kind %r", row.get("kind"))
            continue
        out.append(
            WellnessEntry(
                kind=cast(WellnessKind, kind),
                recorded_at=_parse_datetime(row["recorded_at"], local_tz),
            )
        )
    return out


def _row_to_record(row: dict[str, object], local_tz: tzinfo | None) -> GlucoseRecord:
    raw_slot = row.get("slot")
    slot = parse_slot(None if _is_missing(raw_slot) else raw_slot)
    if slot is None and not _is_missing(raw_slot):
        logger.warning("Unknown slot %r for record %s", raw_slot, row["id"])
    notes = row.get("notes")
    return GlucoseRecord(
        id=str(row["id"]),
        value=_parse_value(row["value"]),
        recorded_at=_parse_datetime(row["recorded_at"], local_tz),
        slot=slot,
        notes=None if _is_missing(notes) else str(notes),
    )


def _parse_value(raw: object) -> int:
    # Malformed values are not sanitized here; NaN surfaces downstream.
    number = float(cast(float, raw))
    if pd.isna(number):
        return cast(int, number)
    return int(round(number))


def _parse_datetime(raw: object, local_tz: tzinfo | None) -> datetime:
    parsed = cast(datetime, pd.to_datetime(raw).to_pydatetime())
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=local_tz)
    return parsed.astimezone(local_tz)


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    return isinstance(value, str) and not value.strip()
