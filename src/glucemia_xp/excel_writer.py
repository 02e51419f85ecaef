"""Generación de Excel formateado con glucometrías, estadísticas y XP."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from glucemia_xp.model import DailySlotMap, GlucoseRecord, PeriodStats, XPResult
from glucemia_xp.status import SLOT_LABELS, STATUS_LABELS, classify

_DIA_SEMANA: tuple[str, ...] = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")

_RECORD_HEADERS: tuple[str, ...] = (
    "Día",
    "Fecha / Hora",
    "Glucosa (mg/dL)",
    "Franja",
    "Estado",
    "Notas",
)

_SUMMARY_HEADERS: tuple[str, ...] = ("Métrica", "Valor")

_STATS_LABELS: tuple[tuple[str, str], ...] = (
    ("count", "Mediciones"),
    ("avg", "Promedio (mg/dL)"),
    ("std_dev", "Desvío estándar"),
    ("min", "Mínimo (mg/dL)"),
    ("max", "Máximo (mg/dL)"),
    ("in_range_count", "En rango (70-180)"),
    ("in_range_percent", "% en rango"),
    ("total_days", "Días del período"),
    ("days_with_records", "Días con registros"),
    ("days_with_records_percent", "% días con registros"),
    ("avg_takes_per_day", "Tomas por día"),
)


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the report."""

    records_sheet: str = "Registros"
    summary_sheet: str = "Resumen"


def _weekday_label(value: datetime) -> str:
    """Convierte fecha a etiqueta de 3 letras (lunes-domingo)."""
    return _DIA_SEMANA[value.weekday()]


def _naive(value: datetime) -> datetime:
    """Excel no admite timezone: se conserva la hora local."""
    return value.replace(tzinfo=None) if value.tzinfo is not None else value


def records_sheet_frame(records: Sequence[GlucoseRecord]) -> pd.DataFrame:
    """One row per reading with weekday, slot and status labels."""
    rows = [
        {
            "Día": _weekday_label(r.recorded_at),
            "Fecha / Hora": _naive(r.recorded_at),
            "Glucosa (mg/dL)": r.value,
            "Franja": SLOT_LABELS[r.slot] if r.slot is not None else "",
            "Estado": STATUS_LABELS[classify(r.value)],
            "Notas": r.notes or "",
        }
        for r in sorted(records, key=lambda r: r.recorded_at)
    ]
    return pd.DataFrame(rows, columns=list(_RECORD_HEADERS))


def summary_sheet_frame(
    stats: PeriodStats | None,
    day_map: DailySlotMap,
    xp: XPResult | None,
) -> pd.DataFrame:
    """Metric/value rows for the period stats, the day's slots and XP."""
    rows: list[tuple[str, object]] = []
    if stats is None:
        rows.append(("Estadísticas", "Sin datos"))
    else:
        rows.extend((label, getattr(stats, field)) for field, label in _STATS_LABELS)

    for slot, label in SLOT_LABELS.items():
        record = day_map.get(slot)
        rows.append((label, record.value if record is not None else ""))

    if xp is not None:
        rows.extend(
            [
                ("XP franjas", xp.breakdown.slots_xp),
                ("XP en rango", xp.breakdown.in_range_xp),
                ("XP bienestar", xp.breakdown.wellness_xp),
                ("XP base", xp.base_xp),
                ("Racha (días)", xp.streak_days),
                ("Multiplicador", xp.streak_multiplier),
                ("XP final", xp.final_xp),
                ("Franjas completadas", f"{xp.slots_completed}/{xp.total_slots}"),
            ]
        )
    return pd.DataFrame(rows, columns=list(_SUMMARY_HEADERS))


def write_glucose_report(
    records: Sequence[GlucoseRecord],
    stats: PeriodStats | None,
    day_map: DailySlotMap,
    xp: XPResult | None,
    out_path: Path,
    layout: ExcelLayout,
) -> None:
    """Write a formatted Excel report suitable for printing.

    Args:
        records: Readings of the period (already range-filtered).
        stats: Period statistics, None when there is no data.
        day_map: The reference day's slot map.
        xp: The reference day's XP, if computed.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    records_df = records_sheet_frame(records)
    summary_df = summary_sheet_frame(stats, day_map, xp)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        records_df.to_excel(writer, index=False, sheet_name=layout.records_sheet)
        summary_df.to_excel(writer, index=False, sheet_name=layout.summary_sheet)
        _format_sheet(writer.book[layout.records_sheet])
        _format_sheet(writer.book[layout.summary_sheet])


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    """Aplica alineación, borde y altura fija a las filas de datos."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border
        ws.row_dimensions[row[0].row].height = 15


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    """Establece anchos de columna para evitar ###."""
    widths = [
        ("Día", 6),
        ("Fecha / Hora", 18),
        ("Glucosa (mg/dL)", 14),
        ("Franja", 22),
        ("Estado", 12),
        ("Notas", 30),
        ("Métrica", 24),
        ("Valor", 14),
    ]
    for header, width in widths:
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    """Aplica formatos numéricos por cabecera."""
    fmt_map: dict[str, str] = {
        "Fecha / Hora": "dd/mm/yyyy hh:mm",
        "Glucosa (mg/dL)": "0",
    }
    for row in ws.iter_rows(min_row=2):
        for header, fmt in fmt_map.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    col_index = _get_header_col_index(ws)
    _apply_column_widths(ws, col_index)
    _apply_number_formats(ws, col_index)
