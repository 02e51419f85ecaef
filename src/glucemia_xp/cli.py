"""CLI: estadísticas del período, franjas del día y XP diario a partir de exportaciones."""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime, timedelta
from pathlib import Path

from glucemia_xp.config import AppConfig, load_config
from glucemia_xp.excel_writer import ExcelLayout, write_glucose_report
from glucemia_xp.slots import merge_by_date, merge_by_range
from glucemia_xp.sources.accuchek import AccuChekPaths, AccuChekSource
from glucemia_xp.sources.base import RecordSource
from glucemia_xp.sources.csv_records import (
    CsvRecordPaths,
    CsvRecordSource,
    load_wellness,
)
from glucemia_xp.stats import compute_period_stats
from glucemia_xp.streak import compute_streak
from glucemia_xp.wellness import has_entry_on
from glucemia_xp.xp import compute_daily_xp, current_level

logger = logging.getLogger(__name__)


def _parse_day(raw: str) -> date:
    return datetime.strptime(raw, "%Y-%m-%d").date()


def _positive_days(raw: str) -> int:
    days = int(raw)
    if days < 1:
        raise argparse.ArgumentTypeError(f"debe ser al menos 1 día: {raw}")
    return days


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Glucometrías: estadísticas del período, franjas y XP diario."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--accuchek-dir",
        help="Carpeta con exportaciones accuchek_*.json (se usa la más reciente).",
    )
    source.add_argument(
        "--csv",
        help="CSV con columnas id, value, recorded_at, slot, notes.",
    )
    parser.add_argument(
        "--wellness",
        help="CSV de bienestar con columnas kind (sleep/stress), recorded_at.",
    )
    parser.add_argument(
        "--day",
        type=_parse_day,
        default=None,
        help="Día de referencia YYYY-MM-DD (default: hoy).",
    )
    parser.add_argument(
        "--days",
        type=_positive_days,
        default=None,
        help="Largo del período en días terminando en --day (default: config).",
    )
    parser.add_argument(
        "--streak",
        type=int,
        default=None,
        help="Racha actual; si se omite se calcula desde los registros.",
    )
    parser.add_argument(
        "--total-xp",
        type=int,
        default=0,
        help="XP acumulado previo, para mostrar el nivel.",
    )
    parser.add_argument("--export-dir", default=None, help="Carpeta de salida.")
    parser.add_argument("--config", default=None, help="Archivo de configuración JSON.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log detallado.")
    return parser.parse_args()


def build_source(ns: argparse.Namespace, config: AppConfig) -> RecordSource:
    """Create the record source selected on the command line."""
    if ns.accuchek_dir:
        root = Path(ns.accuchek_dir).expanduser().resolve()
        return AccuChekSource(AccuChekPaths(root=root), timezone=config.timezone)
    root = Path(ns.csv).expanduser().resolve()
    return CsvRecordSource(CsvRecordPaths(root=root), timezone=config.timezone)


def main() -> int:
    """Run the report CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = load_config(Path(ns.config).expanduser() if ns.config else None)
    local_tz = config.local_tz()

    source = build_source(ns, config)
    source.validate()
    records = source.list()

    day = ns.day if ns.day is not None else datetime.now(tz=local_tz).date()
    days = ns.days if ns.days is not None else config.period_days
    start = day - timedelta(days=days - 1)
    logger.debug("Period %s..%s over %d records", start, day, len(records))

    period_records = merge_by_range(records, start, day)
    stats = compute_period_stats(period_records, start, day)
    day_map = merge_by_date(records, day)

    wellness = (
        load_wellness(Path(ns.wellness).expanduser(), config.timezone)
        if ns.wellness
        else []
    )
    streak = (
        ns.streak
        if ns.streak is not None
        else compute_streak(records, day, config.streak_min_records)
    )
    xp = compute_daily_xp(
        day_map,
        has_sleep_logged=has_entry_on(wellness, "sleep", day),
        has_stress_logged=has_entry_on(wellness, "stress", day),
        streak_days=streak,
        total_accumulated_xp=ns.total_xp,
    )
    level = current_level(ns.total_xp + xp.final_xp)

    export_dir = ns.export_dir or config.export_dir
    out_dir = Path(export_dir).expanduser() if export_dir else Path.cwd() / "salidas"
    ts = datetime.now(tz=local_tz).strftime("%Y-%m-%d_%H-%M-%S")
    out_path = out_dir / f"glucemia_xp_{ts}.xlsx"

    write_glucose_report(period_records, stats, day_map, xp, out_path, ExcelLayout())

    print(f"OK: Records: {len(records)} ({len(period_records)} in {start}..{day})")
    if stats is None:
        print("OK: Period stats: no data")
    else:
        print(
            f"OK: Period stats: avg {stats.avg} mg/dL, "
            f"{stats.in_range_percent}% in range, "
            f"{stats.days_with_records}/{stats.total_days} days"
        )
    print(
        f"OK: XP {xp.final_xp} (base {xp.base_xp} x{xp.streak_multiplier}, "
        f"{xp.slots_completed}/{xp.total_slots} slots), "
        f"level {level.level} {level.title}"
    )
    print(f"OK: Output: {out_path}")
    return 0
