"""Finding free blocks and sectors, and marking full ones in the route files."""

from __future__ import annotations

import sys
from pathlib import Path

from megatrom.blockheader import parse_fields, parse_int_fields, to_ints

FREE = "0"
FULL = "1"


def _lines(path: str | Path) -> list[str]:
    """Lines of a text file without their trailing newline."""
    with open(path, encoding="utf-8", newline="") as handle:
        return [line.removesuffix("\n") for line in handle]


def _status(field: str) -> int:
    values = to_ints([field])
    if not values:
        raise ValueError(f"Campo de estado inválido: {field!r}")
    return values[0]


def _first_free(lines: list[str]) -> tuple[str, str] | None:
    """The first route line not marked full, with the path it holds."""
    for line in lines:
        fields = parse_fields(line)
        if len(fields) >= 2 and _status(fields[0]) != 1:
            return line, fields[1]
    return None


def mark_full(line: str) -> str:
    """Turn the '0' just before the first '#' into '1'; otherwise return the line unchanged."""
    pos = line.find("#")
    if pos > 0 and line[pos - 1] == FREE:
        return line[: pos - 1] + FULL + line[pos:]
    return line


def available_sector(blocks_path: str | Path) -> str:
    """Path of the first free sector listed in the first free block.

    Raises LookupError when no free block or no free sector in it is left.
    """
    block = _first_free(_lines(blocks_path))
    if block is None:
        raise LookupError(f"No hay bloques disponibles en {blocks_path}")
    block_line, block_path = block
    print(f"bloque disponible: {block_line}")

    sector = _first_free(_lines(block_path)[1:])
    if sector is None:
        raise LookupError(f"No hay sectores disponibles en el bloque {block_path}")
    sector_line, sector_path = sector
    print(f"sector disponible: {sector_line}")
    return sector_path


def check_full_sectors(blocks_path: str | Path) -> bool:
    """Mark the first free sector of the first free block as full if its header says so.

    Returns True when a sector was marked.
    """
    block_line = block_path = None
    for line in _lines(blocks_path):
        fields = parse_fields(line)
        if len(fields) < 2:
            continue
        if _status(fields[0]) == 0:
            block_line, block_path = line, fields[1]
            break
    if block_path is None:
        return False
    print(f"Bloque para verificar: {block_line}")

    with open(block_path, "r+b") as handle:
        if not handle.readline():
            return False
        while True:
            position = handle.tell()
            raw = handle.readline()
            if not raw:
                return False
            sector_line = raw.decode("utf-8").removesuffix("\n")
            fields = parse_fields(sector_line)
            if len(fields) < 2:
                raise ValueError(f"Formato inválido en línea de sector: {sector_line!r}")
            if _status(fields[0]) == 0:
                break

        with open(fields[1], encoding="utf-8", newline="") as sector:
            header = sector.readline().removesuffix("\n")
        values = parse_int_fields(header)
        if len(values) < 5:
            raise ValueError(f"Cabecera del sector con formato inválido: {header!r}")

        if values[3] == values[4]:
            handle.seek(position)
            handle.write(mark_full(sector_line).encode("utf-8"))
            print("Sector marcado como lleno.")
            return True
    print("Sector aún tiene espacio.")
    return False


def check_full_blocks(blocks_path: str | Path) -> list[str]:
    """Mark every free block whose sectors are all full; return the marked block paths.

    A block that lists no sectors at all counts as full.
    """
    marked: list[str] = []
    with open(blocks_path, "r+b") as handle:
        while True:
            start = handle.tell()
            raw = handle.readline()
            if not raw:
                break
            line = raw.decode("utf-8").removesuffix("\n")
            if not line:
                continue
            fields = parse_fields(line)
            if len(fields) < 2 or fields[0] != FREE:
                continue
            block_path = fields[1]
            try:
                sector_lines = _lines(block_path)[1:]
            except OSError:
                print(f"No se pudo abrir bloque: {block_path}", file=sys.stderr)
                continue
            if any(sector.startswith(FREE + "#") for sector in sector_lines):
                continue
            updated = mark_full(line)
            handle.seek(start)
            handle.write(updated.encode("utf-8"))
            handle.flush()
            handle.seek(start + len(raw))
            print(f"Bloque lleno marcado: {updated}")
            marked.append(block_path)
    return marked