"""Lectura de exportaciones JSON de Accu-Chek como glucometrías."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any

from dateutil import tz

from glucemia_xp.config import DEFAULT_TZ
from glucemia_xp.model import GlucoseRecord
from glucemia_xp.sources.base import RecordSource, SourcePaths
from glucemia_xp.status import parse_slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccuChekPaths(SourcePaths):
    """Paths for Accu-Chek JSON exports."""

    # root: folder containing accuchek_*.json


class AccuChekSource(RecordSource):
    """Accu-Chek JSON reading source (newest export wins)."""

    def __init__(self, paths: AccuChekPaths, timezone: str = DEFAULT_TZ) -> None:
        super().__init__(paths)
        self._tz = tz.gettz(timezone)

    def validate(self) -> None:
        """Validate that the Accu-Chek export directory exists."""
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))

    def newest_json(self) -> Path:
        """Return newest accuchek_*.json by mtime."""
        files = sorted(
            self._paths.root.glob("accuchek_*.json"),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        if not files:
            raise FileNotFoundError(f"No accuchek_*.json in {self._paths.root}")
        return files[0]

    def list(self) -> list[GlucoseRecord]:
        """Load readings from the newest export."""
        path = self.newest_json()
        logger.info("Reading Accu-Chek export %s", path)
        return self.load_records(path)

    def load_records(self, path: Path) -> list[GlucoseRecord]:
        """Parse Accu-Chek JSON into glucose records.

        Args:
            path: Path to JSON file.

        Returns:
            Records sorted by time.

        Raises:
            ValueError: If JSON shape is invalid.
        """
        text = path.read_text(encoding="utf-8")
        raw = _extract_json_list(text)
        if not isinstance(raw, list):
            raise ValueError("Accu-Chek JSON must be a list")

        out: list[GlucoseRecord] = []
        for index, item in enumerate(raw):
            record = _item_to_record(item, self._tz)
            if record is None:
                logger.debug("Skipping Accu-Chek item %d without mg/dL", index)
                continue
            out.append(record)
        out.sort(key=lambda r: r.recorded_at)
        return out


def _parse_tag(item: dict[str, Any]) -> str | None:
    """Extrae y normaliza el tag de un ítem (vacío -> None)."""
    tag_val = item.get("tag")
    if tag_val is None:
        return None
    tag = str(tag_val).strip()
    return tag if tag else None


def _item_to_record(item: Any, local_tz: tzinfo | None) -> GlucoseRecord | None:
    """Convierte un ítem dict en GlucoseRecord; None si falta mg/dL."""
    if not isinstance(item, dict):
        return None
    mg_dl = item.get("mg/dL")
    if mg_dl is None:
        return None
    ts = _parse_timestamp(item.get("timestamp"), item.get("epoch"), local_tz)
    value = int(round(float(mg_dl)))
    tag = _parse_tag(item)
    slot = parse_slot(tag)
    return GlucoseRecord(
        id=f"accuchek-{ts.strftime('%Y%m%d%H%M%S')}-{value}",
        value=value,
        recorded_at=ts,
        slot=slot,
        # Tags that name a slot are not repeated as notes.
        notes=tag if slot is None else None,
    )


def _extract_json_list(text: str) -> Any:
    """Extract JSON array from text, tolerating leading non-JSON (e.g. log lines)."""
    start = text.find("[")
    if start >= 0:
        return json.loads(text[start:])
    return json.loads(text)


def _parse_timestamp(ts_str: Any, epoch: Any, local_tz: tzinfo | None) -> datetime:
    """Parses the timestamps to get the date and time."""
    if isinstance(ts_str, str) and ts_str.strip():
        dt = datetime.strptime(ts_str, "%Y/%m/%d %H:%M")
        return dt.replace(tzinfo=local_tz)

    if epoch is not None:
        return datetime.fromtimestamp(int(epoch), tz=local_tz)

    raise ValueError("Missing timestamp and epoch")
