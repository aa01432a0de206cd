"""Low-level writes of records into sector files."""

from __future__ import annotations

from pathlib import Path


class DiskController:
    """Appends records to sector files."""

    def insert(self, record: str, record_size: int, sector_path: str | Path) -> None:
        """Append one record as a line; the reserved size is kept by the header, not here."""
        with open(sector_path, "a", encoding="utf-8") as handle:
            handle.write(record + "\n")