from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest
from dateutil import tz

from glucemia_xp.model import GlucoseSlot
from glucemia_xp.sources.accuchek import (
    AccuChekPaths,
    AccuChekSource,
    _extract_json_list,
    _parse_timestamp,
)

_BA = tz.gettz("America/Argentina/Buenos_Aires")


def test_accuchek_parses_list(tmp_path: Path) -> None:
    data = [
        {"timestamp": "2026/01/31 11:57", "mg/dL": 119, "mmol/L": 6.611111},
        {"epoch": 1769774400, "mg/dL": 118, "mmol/L": 6.555556},
    ]
    p = tmp_path / "accuchek_2026-01-31_11-57-00.json"
    p.write_text(json.dumps(data), encoding="utf-8")

    src = AccuChekSource(AccuChekPaths(root=tmp_path))
    records = src.load_records(p)

    assert len(records) == 2
    assert records[0].recorded_at <= records[1].recorded_at
    assert {r.value for r in records} == {118, 119}
    assert all(isinstance(r.value, int) for r in records)


def test_tag_maps_to_slot_or_notes(tmp_path: Path) -> None:
    data = [
        {"timestamp": "2026/01/31 07:10", "mg/dL": 101, "tag": "before_breakfast"},
        {"timestamp": "2026/01/31 13:40", "mg/dL": 165, "tag": "Después del almuerzo"},
        {"timestamp": "2026/01/31 16:00", "mg/dL": 88, "tag": "  ejercicio "},
        {"timestamp": "2026/01/31 18:00", "mg/dL": 92, "tag": ""},
    ]
    p = tmp_path / "accuchek_tags.json"
    p.write_text(json.dumps(data), encoding="utf-8")

    records = AccuChekSource(AccuChekPaths(root=tmp_path)).load_records(p)

    assert [r.slot for r in records] == [
        GlucoseSlot.BEFORE_BREAKFAST,
        GlucoseSlot.AFTER_LUNCH,
        None,
        None,
    ]
    assert [r.notes for r in records] == [None, None, "ejercicio", None]
    assert records[0].id == "accuchek-20260131071000-101"


def test_items_without_mg_dl_are_skipped(tmp_path: Path) -> None:
    data = [
        {"timestamp": "2026/01/31 07:10", "mmol/L": 5.6},
        "ruido",
        {"mg/dL": 90, "epoch": 1769774400},
    ]
    p = tmp_path / "accuchek_partial.json"
    p.write_text(json.dumps(data), encoding="utf-8")
    records = AccuChekSource(AccuChekPaths(root=tmp_path)).load_records(p)
    assert [r.value for r in records] == [90]


def test_non_list_json_raises(tmp_path: Path) -> None:
    p = tmp_path / "accuchek_bad.json"
    p.write_text('{"mg/dL": 90}', encoding="utf-8")
    with pytest.raises(ValueError, match="must be a list"):
        AccuChekSource(AccuChekPaths(root=tmp_path)).load_records(p)


def test_list_reads_newest_export(tmp_path: Path) -> None:
    p = tmp_path / "accuchek_2026-01-31.json"
    p.write_text(json.dumps([{"timestamp": "2026/01/31 07:10", "mg/dL": 101}]))
    records = AccuChekSource(AccuChekPaths(root=tmp_path)).list()
    assert len(records) == 1
    assert records[0].recorded_at == datetime(2026, 1, 31, 7, 10, tzinfo=_BA)


def test_validate_raises_when_root_missing(tmp_path: Path) -> None:
    missing = tmp_path / "noexiste"
    src = AccuChekSource(AccuChekPaths(root=missing))
    with pytest.raises(FileNotFoundError, match=str(missing)):
        src.validate()


def test_validate_succeeds_when_root_exists(tmp_path: Path) -> None:
    src = AccuChekSource(AccuChekPaths(root=tmp_path))
    src.validate()


def test_newest_json_raises_when_no_files(tmp_path: Path) -> None:
    src = AccuChekSource(AccuChekPaths(root=tmp_path))
    with pytest.raises(FileNotFoundError, match="No accuchek_"):
        src.newest_json()


def test_newest_json_returns_only_file(tmp_path: Path) -> None:
    p = tmp_path / "accuchek_2026-01-31.json"
    p.write_text("[]", encoding="utf-8")
    src = AccuChekSource(AccuChekPaths(root=tmp_path))
    assert src.newest_json() == p


def test_extract_json_list_tolerates_leading_log_lines() -> None:
    text = 'INFO exported 1 reading\n[{"mg/dL": 100}]'
    assert _extract_json_list(text) == [{"mg/dL": 100}]


def test_parse_timestamp_variants() -> None:
    utc = tz.gettz("UTC")
    assert _parse_timestamp("2026/01/31 11:57", None, utc) == datetime(
        2026, 1, 31, 11, 57, tzinfo=utc
    )
    assert _parse_timestamp(None, 0, utc) == datetime(1970, 1, 1, tzinfo=utc)
    with pytest.raises(ValueError, match="Missing timestamp"):
        _parse_timestamp("  ", None, utc)
