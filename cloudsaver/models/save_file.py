"""Data model for save files found on disk."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from loguru import logger


@dataclass
class SaveFileRecord:
    """A single save file and the emulator it was attributed to."""

    path: Path
    """Absolute path to the save file."""

    emulator_id: str
    """Owning emulator id."""

    size: int = 0
    """File size in bytes."""

    modified: datetime = field(default_factory=datetime.now)
    """Last modification time."""

    def refresh_stat(self) -> None:
        """Update size and modified time from disk."""
        if self.path.exists():
            stat = self.path.stat()
            self.size = stat.st_size
            self.modified = datetime.fromtimestamp(stat.st_mtime)


def records_from_paths(emulator_id: str, paths: list[Path]) -> list[SaveFileRecord]:
    """Wrap resolver output into stat-populated records."""
    records: list[SaveFileRecord] = []
    for p in paths:
        record = SaveFileRecord(path=p, emulator_id=emulator_id)
        try:
            record.refresh_stat()
        except OSError as e:
            logger.debug("Could not stat {}: {}", p, e)
        records.append(record)
    return records


def format_size(size: int) -> str:
    """Human-readable byte count (``1.5 KB``)."""
    if size < 1024:
        return f"{max(size, 0)} B"
    value = size / 1024
    for unit in ("KB", "MB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"
