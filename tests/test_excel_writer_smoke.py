from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import cast

from dateutil import tz
from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from glucemia_xp.excel_writer import (
    ExcelLayout,
    _format_sheet,
    summary_sheet_frame,
    write_glucose_report,
)
from glucemia_xp.model import GlucoseRecord, GlucoseSlot
from glucemia_xp.slots import merge_by_date
from glucemia_xp.stats import compute_period_stats
from glucemia_xp.xp import compute_daily_xp

_BA = tz.gettz("America/Argentina/Buenos_Aires")


def _records() -> list[GlucoseRecord]:
    return [
        GlucoseRecord(
            id="2",
            value=190,
            recorded_at=datetime(2025, 12, 16, 13, 45, tzinfo=_BA),
            slot=GlucoseSlot.AFTER_LUNCH,
            notes="pizza",
        ),
        GlucoseRecord(
            id="1",
            value=105,
            recorded_at=datetime(2025, 12, 15, 8, 30, tzinfo=_BA),
            slot=GlucoseSlot.BEFORE_BREAKFAST,
        ),
    ]


def test_write_glucose_report_happy_path_and_formatting(tmp_path: Path) -> None:
    records = _records()
    day = date(2025, 12, 16)
    stats = compute_period_stats(records, date(2025, 12, 15), day)
    day_map = merge_by_date(records, day)
    xp = compute_daily_xp(
        day_map, has_sleep_logged=True, has_stress_logged=False, streak_days=2
    )
    out = tmp_path / "nested" / "out.xlsx"
    write_glucose_report(records, stats, day_map, xp, out, ExcelLayout())

    wb = load_workbook(out)
    ws = cast(Worksheet, wb[ExcelLayout().records_sheet])

    headers = [cell.value for cell in ws[1]]
    assert headers == [
        "Día",
        "Fecha / Hora",
        "Glucosa (mg/dL)",
        "Franja",
        "Estado",
        "Notas",
    ]

    assert ws.cell(row=2, column=1).value == "lun"
    assert ws.cell(row=2, column=2).value == datetime(2025, 12, 15, 8, 30)
    assert ws.cell(row=2, column=3).value == 105
    assert ws.cell(row=2, column=4).value == "Antes del desayuno"
    assert ws.cell(row=3, column=5).value == "Alta"
    assert ws.cell(row=3, column=6).value == "pizza"

    assert ws.column_dimensions["A"].width == 6
    franja_letter = get_column_letter(headers.index("Franja") + 1)
    assert ws.column_dimensions[franja_letter].width == 22
    assert ws.cell(row=2, column=2).number_format == "dd/mm/yyyy hh:mm"

    summary = cast(Worksheet, wb[ExcelLayout().summary_sheet])
    rows = {row[0].value: row[1].value for row in summary.iter_rows(min_row=2)}
    assert rows["Mediciones"] == 2
    assert rows["Promedio (mg/dL)"] == 148
    assert rows["Después del almuerzo"] == 190
    assert rows["XP base"] == xp.base_xp
    assert rows["XP final"] == xp.final_xp
    assert summary.cell(row=1, column=1).font.bold is True


def test_summary_without_stats_or_xp() -> None:
    df = summary_sheet_frame(None, {}, None)
    assert df.iloc[0].tolist() == ["Estadísticas", "Sin datos"]
    assert len(df) == 1 + len(GlucoseSlot)
    assert "XP final" not in df["Métrica"].tolist()


def test_format_sheet_handles_missing_headers() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Solo"])
    ws.append([1])

    _format_sheet(ws)

    assert ws.cell(row=1, column=1).font.bold is True
    assert ws.cell(row=2, column=1).alignment.horizontal == "center"
