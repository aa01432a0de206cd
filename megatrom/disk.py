"""Geometry of the simulated disk and its materialisation as files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from megatrom.layout import Layout

SURFACES_PER_PLATE = 2


@dataclass
class Disk:
    """A disk made of plates, two surfaces each, tracks and fixed-size sectors."""

    plates: int = 0
    surfaces: int = SURFACES_PER_PLATE
    tracks_per_surface: int = 0
    sectors_per_track: int = 0
    sector_size: int = 0
    capacity: int = 0

    def custom(
        self,
        plates: int,
        tracks_per_surface: int,
        sectors_per_track: int,
        sector_size: int,
    ) -> None:
        """Set a user-chosen geometry."""
        self.plates = plates
        self.surfaces = SURFACES_PER_PLATE
        self.tracks_per_surface = tracks_per_surface
        self.sectors_per_track = sectors_per_track
        self.sector_size = sector_size

    def static_default(self) -> None:
        """Set the built-in default geometry."""
        self.plates = 8
        self.surfaces = SURFACES_PER_PLATE
        self.tracks_per_surface = 10
        self.sectors_per_track = 15
        self.sector_size = 1024

    def create(self, layout: Layout) -> None:
        """Create the directory tree and one empty file per sector."""
        try:
            layout.disk_dir.mkdir(parents=True)
            print("Carpeta creada exitosamente.")
        except FileExistsError:
            print("No se pudo crear la carpeta (quizá ya existe).")

        for plate in range(1, self.plates + 1):
            for surface in range(1, self.surfaces + 1):
                for track in range(1, self.tracks_per_surface + 1):
                    first = layout.sector_path(plate, surface, track, 1)
                    first.parent.mkdir(parents=True, exist_ok=True)
                    for sector in range(1, self.sectors_per_track + 1):
                        layout.sector_path(plate, surface, track, sector).write_text("")

    def compute_capacity(self) -> int:
        """Set and return the raw capacity in bytes."""
        self.capacity = (
            self.plates
            * self.surfaces
            * self.tracks_per_surface
            * self.sectors_per_track
            * self.sector_size
        )
        return self.capacity

    @property
    def total_tracks(self) -> int:
        return self.plates * self.surfaces * self.tracks_per_surface

    @property
    def total_sectors(self) -> int:
        return self.total_tracks * self.sectors_per_track

    def save(self, path: str | Path) -> None:
        """Write the geometry and capacity as one '#'-separated line."""
        values = (
            self.plates,
            self.surfaces,
            self.tracks_per_surface,
            self.sectors_per_track,
            self.sector_size,
            self.capacity,
        )
        Path(path).write_text("#".join(str(v) for v in values))