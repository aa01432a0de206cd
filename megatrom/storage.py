"""Storage manager: groups sectors into blocks and places records on the disk."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import islice
from pathlib import Path

from megatrom.availability import (
    available_sector,
    check_full_blocks,
    check_full_sectors,
)
from megatrom.blockheader import HEADER_OVERHEAD, update_header, update_header_block
from megatrom.controller import DiskController
from megatrom.disk import SURFACES_PER_PLATE, Disk
from megatrom.layout import Layout


def _lines(path: str | Path) -> list[str]:
    with open(path, encoding="utf-8", newline="") as handle:
        return [line.removesuffix("\n") for line in handle]


@dataclass
class StorageManager:
    """Keeps the disk geometry, block figures and the route files up to date."""

    layout: Layout = field(default_factory=Layout)
    disk: Disk = field(default_factory=Disk)
    controller: DiskController = field(default_factory=DiskController)
    sectors_per_block: int = 0
    max_record_length: int = 0
    block_capacity: int = 0
    blocks_per_track: int = 0
    blocks_per_plate: int = 0
    total_blocks: int = 0

    def compute_block_capacity(self) -> int:
        """Set and return the size of a block in bytes."""
        self.block_capacity = self.disk.sector_size * self.sectors_per_block
        return self.block_capacity

    def compute_blocks_per_track(self) -> int:
        """Set and return how many whole blocks fit in one track."""
        self.blocks_per_track = self.disk.sectors_per_track // self.sectors_per_block
        return self.blocks_per_track

    def compute_blocks_per_plate(self) -> int:
        """Set and return how many whole blocks fit on one plate."""
        self.blocks_per_plate = (
            SURFACES_PER_PLATE
            * (self.disk.tracks_per_surface * self.disk.sectors_per_track)
            // self.sectors_per_block
        )
        return self.blocks_per_plate

    def compute_total_blocks(self) -> int:
        """Set and return how many whole blocks fit on the disk."""
        self.total_blocks = (
            self.disk.plates
            * SURFACES_PER_PLATE
            * self.disk.tracks_per_surface
            * self.disk.sectors_per_track
        ) // self.sectors_per_block
        return self.total_blocks

    def write_header(self, sector_path: str | Path, template_path: str | Path) -> None:
        """Replace a sector's contents with the first line of the header template."""
        with open(template_path, encoding="utf-8", newline="") as handle:
            header = handle.readline().removesuffix("\n")
        with open(sector_path, "w", encoding="utf-8", newline="") as handle:
            handle.write(header + "\n")

    def generate_route_files(self) -> None:
        """List every sector, track by track, and give each a fresh header.

        Sectors of the middle track go to the block-routes file, the rest to
        the sector-routes file. Every header costs its overhead in capacity.
        """
        print("Crear archivo de rutas en orden por pista-sector...")
        layout = self.layout
        middle = self.disk.tracks_per_surface // 2
        with open(layout.routes, "w", encoding="utf-8", newline="") as routes, open(
            layout.block_routes, "w", encoding="utf-8", newline=""
        ) as block_routes:
            for track in range(1, self.disk.tracks_per_surface + 1):
                target = block_routes if track == middle else routes
                for sector in range(1, self.disk.sectors_per_track + 1):
                    for plate in range(1, self.disk.plates + 1):
                        for surface in range(1, SURFACES_PER_PLATE + 1):
                            path = layout.sector_path(plate, surface, track, sector)
                            target.write(f"0#{path}\n")
                            self.write_header(path, layout.header_template)
                            self.disk.capacity -= HEADER_OVERHEAD
        print("Archivo rutas.txt generado correctamente.")

    def insert_block_routes(
        self, blocks_path: str | Path, sectors_path: str | Path
    ) -> None:
        """Hand out the listed sectors to the blocks, sectors_per_block each, in order."""
        sectors = iter(_lines(sectors_path))
        for line in _lines(blocks_path):
            if "#" not in line:
                continue
            block_path = line.partition("#")[2]
            batch = list(islice(sectors, self.sectors_per_block))
            for sector_line in batch:
                self.insert_record_block(sector_line, block_path, self.max_record_length)
                self.disk.capacity -= self.max_record_length
            if len(batch) < self.sectors_per_block:
                break

    def insert_record(
        self, record: str, sector_path: str | Path, record_size: int
    ) -> None:
        """Store a data record, moving to another free sector if this one is full."""
        target = sector_path
        schema = self.layout.header_schema
        if not update_header(record_size, target, self.disk.sector_size, schema):
            target = available_sector(self.layout.block_routes)
            update_header(record_size, target, self.disk.sector_size, schema)
        self.controller.insert(record, record_size, target)
        self.disk.capacity -= record_size
        check_full_sectors(self.layout.block_routes)
        check_full_blocks(self.layout.block_routes)

    def insert_record_block(
        self, record: str, sector_path: str | Path, record_size: int
    ) -> None:
        """Store a sector route in a block, moving to another free one if this is full."""
        target = sector_path
        schema = self.layout.header_schema
        if not update_header_block(record_size, target, self.sectors_per_block, schema):
            target = available_sector(self.layout.block_routes)
            update_header_block(record_size, target, self.sectors_per_block, schema)
        self.controller.insert(record, record_size, target)

    def save(self) -> None:
        """Write the block size in sectors and the disk geometry to their info files."""
        self.layout.block_info.write_text(str(self.sectors_per_block), encoding="utf-8")
        self.disk.save(self.layout.disk_info)

    def free_capacity(self) -> int:
        """Bytes still free on the disk."""
        return self.disk.capacity