"""Clases base para fuentes de glucometrías."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from glucemia_xp.model import GlucoseRecord


@dataclass(frozen=True)
class SourcePaths:
    """Container for the source location."""

    root: Path


class RecordSource(ABC):
    """Abstract glucose record source."""

    def __init__(self, paths: SourcePaths) -> None:
        """Create a record source.

        Args:
            paths: Source paths configuration.
        """
        self._paths = paths

    @abstractmethod
    def validate(self) -> None:
        """Validate that required folders/files exist.

        Raises:
            FileNotFoundError: If required files are missing.
        """

    @abstractmethod
    def list(self) -> list[GlucoseRecord]:
        """Return the full, currently visible set of readings."""
