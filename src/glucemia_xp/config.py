"""Configuración de la herramienta (archivo JSON con valores por defecto)."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from dateutil import tz

logger = logging.getLogger(__name__)

DEFAULT_TZ = "America/Argentina/Buenos_Aires"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "glucemia_xp" / "config.json"


@dataclass(frozen=True)
class AppConfig:
    """Configuracion persistida de la herramienta."""

    timezone: str = DEFAULT_TZ
    export_dir: str = ""
    period_days: int = 7
    streak_min_records: int = 1

    def local_tz(self) -> Any:
        """Resolve the configured timezone (None if dateutil does not know it)."""
        return tz.gettz(self.timezone)


def load_config(path: Path | None = None) -> AppConfig:
    """Devuelve configuracion guardada o defaults.

    Missing files, malformed JSON and unknown keys fall back to defaults.
    """
    config_path = path if path is not None else DEFAULT_CONFIG_PATH
    defaults = asdict(AppConfig())
    if not config_path.is_file():
        return AppConfig()

    values = _parse_json_object(config_path.read_text(encoding="utf-8"))
    if values is None:
        logger.warning("Ignoring malformed config file %s", config_path)
        return AppConfig()

    merged = {**defaults, **{k: v for k, v in values.items() if k in defaults}}
    return AppConfig(
        timezone=str(merged["timezone"]),
        export_dir=str(merged["export_dir"]),
        period_days=_positive_int(merged["period_days"], defaults["period_days"]),
        streak_min_records=_positive_int(
            merged["streak_min_records"], defaults["streak_min_records"]
        ),
    )


def save_config(config: AppConfig, path: Path | None = None) -> None:
    """Guarda la configuracion como JSON."""
    config_path = path if path is not None else DEFAULT_CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(asdict(config), indent=2), encoding="utf-8")


def _parse_json_object(raw: str) -> dict[str, Any] | None:
    try:
        parsed: Any = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def _positive_int(raw: object, default: int) -> int:
    try:
        value = int(raw)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default
