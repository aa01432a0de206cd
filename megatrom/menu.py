"""Interactive menu that drives disk creation and loading of CSV relations."""

from __future__ import annotations

import argparse
import copy
import sys
from pathlib import Path
from typing import Callable, Sequence, TextIO

from megatrom.availability import available_sector
from megatrom.blockheader import parse_int_fields
from megatrom.csvtools import build_schema, find_max_lengths, longest_record_length
from megatrom.disk import Disk
from megatrom.layout import Layout
from megatrom.storage import StorageManager

DEFAULT_SECTORS_PER_BLOCK = 4

_MENU = (
    "\n----- MEGATROM 3000 -----\n"
    "0. Ya tengo un disco creado \n"
    "1. Crear disco personalizado\n"
    "2. Usar disco por defecto\n"
    "3. Leer archivo CSV y añadir relación\n"
    "4. Caracterisiticas del disco\n"
    "8. Salir\n"
    "Seleccione una opción: "
)

_CUSTOM_PROMPTS = (
    "Ingrese cantidad de platos: ",
    "Pistas por superficie: ",
    "Sectores por pista: ",
    "Tamaño del sector (bytes): ",
    "Sectores por bloque: ",
)

Ask = Callable[[str], str]


def _first_line(path: str | Path) -> str:
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.readline().removesuffix("\n")


def _data_lines(path: str | Path) -> list[str]:
    """Lines of a CSV file after its header, without trailing newlines."""
    with open(path, encoding="utf-8", newline="") as handle:
        lines = [line.removesuffix("\n") for line in handle]
    if not lines:
        raise ValueError(f"Archivo CSV vacío o sin cabecera: {path}")
    return lines[1:]


def _print_ints(values: Sequence[int]) -> None:
    print(" ".join(str(v) for v in values))


def _read_int(ask: Ask, prompt: str) -> int:
    return int(ask(prompt).strip())


def _attach(manager: StorageManager, disk: Disk) -> None:
    """Give the manager its own copy of the disk geometry."""
    manager.disk = copy.copy(disk)


def _prepare_blocks(manager: StorageManager) -> None:
    layout = manager.layout
    manager.compute_block_capacity()
    manager.compute_blocks_per_track()
    manager.compute_blocks_per_plate()
    manager.compute_total_blocks()
    manager.max_record_length = longest_record_length(layout.routes, False)
    manager.insert_block_routes(layout.block_routes, layout.routes)


def show_menu(out: TextIO | None = None) -> None:
    """Write the main menu and the prompt for an option."""
    stream = sys.stdout if out is None else out
    stream.write(_MENU)
    stream.flush()


def load_disk_info(manager: StorageManager, disk: Disk) -> None:
    """Restore the disk geometry and block size saved by an earlier run."""
    layout = manager.layout
    disk_info = parse_int_fields(_first_line(layout.disk_info))
    block_info = parse_int_fields(_first_line(layout.block_info))
    _print_ints(disk_info)
    _print_ints(block_info)
    if len(disk_info) < 5 or not block_info:
        raise ValueError("Información del disco incompleta")

    disk.custom(disk_info[0], disk_info[2], disk_info[3], disk_info[4])
    disk.compute_capacity()
    _attach(manager, disk)
    manager.sectors_per_block = block_info[0]


def create_custom_disk(
    manager: StorageManager,
    disk: Disk,
    plates: int,
    tracks: int,
    sectors: int,
    sector_size: int,
    sectors_per_block: int,
) -> None:
    """Build a disk of the given geometry, its route files and its blocks."""
    layout = manager.layout
    layout.ensure_dirs()

    disk.custom(plates, tracks, sectors, sector_size)
    disk.create(layout)
    disk.compute_capacity()
    disk.save(layout.disk_info)

    _attach(manager, disk)
    manager.sectors_per_block = sectors_per_block
    manager.save()
    manager.generate_route_files()
    _prepare_blocks(manager)

    print("\n--- Información del disco ---")
    print(f"Capacidad: {disk.capacity} bytes")
    print(f"Bloque: {manager.block_capacity} bytes")
    print(f"Total de bloques: {manager.total_blocks}")


def use_default_disk(manager: StorageManager, disk: Disk) -> None:
    """Build the built-in default disk with four sectors per block."""
    layout = manager.layout
    layout.ensure_dirs()

    disk.static_default()
    disk.create(layout)
    disk.compute_capacity()
    disk.save(layout.disk_info)

    _attach(manager, disk)
    manager.generate_route_files()
    manager.sectors_per_block = DEFAULT_SECTORS_PER_BLOCK
    _prepare_blocks(manager)

    print("\n--- Información del disco ---")
    print(f"platos totales: {disk.plates}")
    print(f"pistas totales: {disk.total_tracks}")
    print(f"sectores Totales:{disk.total_sectors}")
    print(f"Capacidad del disco: {disk.capacity} bytes")
    print(f"Capacidad del bloque: {manager.block_capacity} bytes")
    print(f"capacidad del sector: {disk.sector_size} bytes")
    print(f"Total de bloques: {manager.total_blocks}")


def process_csv(manager: StorageManager, disk: Disk, ask: Ask | None = None) -> int:
    """Pick a relation, build its schema and insert some of its rows.

    ``ask`` receives a prompt and returns the user's answer. Returns how many
    records were inserted.
    """
    ask = input if ask is None else ask
    layout = manager.layout
    relations = {
        1: (layout.csv_titanic, layout.types_titanic, layout.schema_titanic, "titanic"),
        2: (layout.csv_housing, layout.types_housing, layout.schema_housing, "housing"),
    }

    choice = _read_int(ask, "Seleccione archivo:\n1. Titanic\n2. Housing\nOpción: ")
    if choice not in relations:
        print("Opción no válida.")
        return 0
    csv_path, types_path, schema_path, relation = relations[choice]

    size = longest_record_length(csv_path, True)
    manager.max_record_length = size

    find_max_lengths(csv_path, layout.max_lengths)
    build_schema(csv_path, types_path, layout.max_lengths, relation, schema_path)

    action = _read_int(
        ask,
        "\n¿Qué desea hacer?\n"
        "1. Insertar 1 registro\n"
        "2. Insertar N registros\n"
        "3. Insertar todo el archivo\n"
        "Opción: ",
    )
    blocks = layout.block_routes
    if action == 1:
        row = _read_int(ask, "Ingrese el número de fila del registro a insertar: ")
        insert_row_from_csv(manager, csv_path, blocks, size, row)
        return 1
    if action == 2:
        print(f"valor: {size}")
        count = _read_int(ask, "¿Cuántos registros desea insertar desde el archivo CSV? ")
        return insert_n_rows_from_csv(manager, csv_path, blocks, size, count)
    if action == 3:
        return insert_all_rows_from_csv(manager, csv_path, blocks, size)
    print("Opción no válida.")
    return 0


def disk_characteristics(manager: StorageManager, disk: Disk) -> tuple[int, int, int]:
    """Print and return the saved capacity, the free bytes and the used bytes."""
    info = parse_int_fields(_first_line(manager.layout.disk_info))
    if len(info) < 6:
        raise ValueError("Información del disco incompleta")
    total = info[5]
    free = manager.free_capacity()
    used = total - free
    print(f"capacidad del disco: {total}")
    print(f"capacidad libre: {free}")
    print(f"capacidad ocupada del disco: {used}")
    return total, free, used


def insert_row_from_csv(
    manager: StorageManager,
    csv_path: str | Path,
    blocks_path: str | Path,
    size: int,
    row: int,
) -> str:
    """Insert one data row (numbered from 0, header excluded) and return it."""
    rows = _data_lines(csv_path)
    if not 0 <= row < len(rows):
        raise IndexError(f"La fila {row} no existe en el archivo.")
    record = rows[row]
    sector = available_sector(blocks_path)
    manager.insert_record(record, sector, size)
    print(f"Registro insertado correctamente:\n{record}")
    return record


def _insert_rows(
    manager: StorageManager,
    rows: Sequence[str],
    blocks_path: str | Path,
    size: int,
) -> int:
    inserted = 0
    for record in rows:
        try:
            sector = available_sector(blocks_path)
        except LookupError:
            print(
                f"No se encontró un sector disponible para el registro #{inserted + 1}",
                file=sys.stderr,
            )
            break
        manager.insert_record(record, sector, size)
        inserted += 1
        print(f"Registro #{inserted} insertado: {record}")
    return inserted


def insert_n_rows_from_csv(
    manager: StorageManager,
    csv_path: str | Path,
    blocks_path: str | Path,
    size: int,
    count: int,
) -> int:
    """Insert the first ``count`` data rows; return how many went in."""
    if count <= 0:
        raise ValueError("La cantidad debe ser mayor que cero.")
    rows = _data_lines(csv_path)[:count]
    inserted = _insert_rows(manager, rows, blocks_path, size)
    if inserted < count:
        print(
            f"Solo se insertaron {inserted} registros. "
            "Puede que no haya sectores disponibles suficientes."
        )
    else:
        print(f"Se insertaron los {count} registros correctamente.")
    return inserted


def insert_all_rows_from_csv(
    manager: StorageManager,
    csv_path: str | Path,
    blocks_path: str | Path,
    size: int,
) -> int:
    """Insert every data row; return how many went in."""
    inserted = _insert_rows(manager, _data_lines(csv_path), blocks_path, size)
    print(f"Total de registros insertados: {inserted}")
    return inserted


def main(argv: Sequence[str] | None = None) -> int:
    """Run the interactive menu until the user leaves."""
    parser = argparse.ArgumentParser(prog="megatrom", description="Simulated disk storage")
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="directory that holds the disk and its bookkeeping files",
    )
    args = parser.parse_args(argv)
    layout = Layout(args.root) if args.root is not None else Layout()
    disk = Disk()
    manager = StorageManager(layout=layout, disk=copy.copy(disk))

    while True:
        show_menu()
        try:
            option = _read_int(input, "")
        except EOFError:
            return 0
        except ValueError:
            option = None

        try:
            if option == 0:
                load_disk_info(manager, disk)
            elif option == 1:
                values = [_read_int(input, prompt) for prompt in _CUSTOM_PROMPTS]
                create_custom_disk(manager, disk, *values)
            elif option == 2:
                use_default_disk(manager, disk)
            elif option == 3:
                process_csv(manager, disk, input)
            elif option == 4:
                disk_characteristics(manager, disk)
            elif option == 8:
                print("Gracias por usar Megatrom 3000. ¡Hasta luego!")
                return 0
            else:
                print("Opción no válida. Intente nuevamente.")
        except EOFError:
            return 0
        except (OSError, ValueError, LookupError) as exc:
            print(f"Error: {exc}", file=sys.stderr)