import io

import pytest

from megatrom.blockheader import HEADER_OVERHEAD, parse_int_fields
from megatrom.disk import Disk
from megatrom.layout import Layout
from megatrom.menu import (
    create_custom_disk,
    disk_characteristics,
    insert_all_rows_from_csv,
    insert_n_rows_from_csv,
    insert_row_from_csv,
    load_disk_info,
    main,
    process_csv,
    show_menu,
    use_default_disk,
)
from megatrom.storage import StorageManager

HEADER = "00000#00000#00000#00000#00000"
CSV_HEADER = "id,name,age"
ROWS = ["1,Ann,30", "2,Bob,41", '3,"Cy, Jr",7']


def _lines(path):
    return path.read_text(encoding="utf-8").splitlines()


def _route_path(line):
    return line.partition("#")[2]


@pytest.fixture
def layout(tmp_path):
    layout = Layout(tmp_path)
    layout.ensure_dirs()
    layout.header_template.write_text(HEADER + "\n", encoding="utf-8")
    layout.header_schema.write_text("5#5#5#5#5\n", encoding="utf-8")
    layout.csv_titanic.write_text(
        "\n".join([CSV_HEADER, *ROWS]) + "\n", encoding="utf-8"
    )
    layout.types_titanic.write_text("int#str#int\n", encoding="utf-8")
    return layout


@pytest.fixture
def built(layout):
    disk = Disk()
    manager = StorageManager(layout=layout)
    create_custom_disk(manager, disk, 1, 2, 2, 512, 2)
    return manager, disk


def _first_data_sector(layout):
    return layout.routes_dir / _route_path(_lines(layout.routes)[0])


def test_show_menu_lists_options():
    out = io.StringIO()
    show_menu(out)
    text = out.getvalue()
    assert "MEGATROM 3000" in text
    assert "8. Salir" in text
    assert text.endswith("Seleccione una opción: ")


def test_create_custom_disk_saves_geometry(built):
    manager, disk = built
    saved = parse_int_fields(_lines(manager.layout.disk_info)[0])
    assert saved == [
        disk.plates,
        disk.surfaces,
        disk.tracks_per_surface,
        disk.sectors_per_track,
        disk.sector_size,
        disk.capacity,
    ]
    assert manager.layout.block_info.read_text(encoding="utf-8") == "2"


def test_create_custom_disk_splits_routes(built):
    manager, disk = built
    routes = _lines(manager.layout.routes)
    blocks = _lines(manager.layout.block_routes)
    assert len(routes) + len(blocks) == disk.total_sectors
    assert all(line.startswith("0#") for line in routes + blocks)


def test_create_custom_disk_fills_blocks_in_order(built):
    manager, disk = built
    routes = _lines(manager.layout.routes)
    first_block = _lines(manager.layout.block_routes)[0]
    block_lines = _lines(manager.layout.routes_dir / _route_path(first_block))
    assert block_lines[1:] == routes[:2]
    header = parse_int_fields(block_lines[0])
    assert header[3] == 2
    assert header[4] == 2
    assert header[2] == manager.max_record_length


def test_create_custom_disk_accounts_capacity(built):
    manager, disk = built
    routes = _lines(manager.layout.routes)
    expected = (
        disk.capacity
        - HEADER_OVERHEAD * disk.total_sectors
        - manager.max_record_length * len(routes)
    )
    assert manager.free_capacity() == expected
    assert manager.total_blocks == disk.total_sectors // 2


def test_load_disk_info_round_trip(built):
    manager, disk = built
    fresh_disk = Disk()
    fresh_manager = StorageManager(layout=manager.layout)
    load_disk_info(fresh_manager, fresh_disk)
    assert fresh_disk.plates == disk.plates
    assert fresh_disk.tracks_per_surface == disk.tracks_per_surface
    assert fresh_disk.sectors_per_track == disk.sectors_per_track
    assert fresh_disk.sector_size == disk.sector_size
    assert fresh_manager.sectors_per_block == 2
    assert fresh_manager.free_capacity() == disk.capacity


def test_load_disk_info_missing_files(layout):
    with pytest.raises(FileNotFoundError):
        load_disk_info(StorageManager(layout=layout), Disk())


def test_disk_characteristics(built):
    manager, disk = built
    total, free, used = disk_characteristics(manager, disk)
    assert total == disk.capacity
    assert free == manager.free_capacity()
    assert used == total - free


def test_process_csv_inserts_everything(built):
    manager, disk = built
    answers = iter(["1", "3"])
    inserted = process_csv(manager, disk, lambda prompt: next(answers))
    assert inserted == len(ROWS)
    schema = manager.layout.schema_titanic.read_text(encoding="utf-8")
    assert schema == "titanic#id#int#1#name#str#6#age#int#2"
    sector = _lines(_first_data_sector(manager.layout))
    assert sector[1:] == ROWS
    header = parse_int_fields(sector[0])
    assert header[3] == len(ROWS)
    assert manager.max_record_length == max(len(r) for r in ROWS)


def test_process_csv_invalid_choice(built):
    manager, disk = built
    assert process_csv(manager, disk, lambda prompt: "7") == 0
    assert not manager.layout.schema_titanic.exists()


def test_insert_row_from_csv(built):
    manager, _ = built
    layout = manager.layout
    record = insert_row_from_csv(manager, layout.csv_titanic, layout.block_routes, 20, 1)
    assert record == ROWS[1]
    assert _lines(_first_data_sector(layout))[1:] == [ROWS[1]]


def test_insert_row_from_csv_missing_row(built):
    manager, _ = built
    layout = manager.layout
    with pytest.raises(IndexError):
        insert_row_from_csv(manager, layout.csv_titanic, layout.block_routes, 20, 5)


def test_insert_n_rows_from_csv(built):
    manager, _ = built
    layout = manager.layout
    count = insert_n_rows_from_csv(manager, layout.csv_titanic, layout.block_routes, 20, 2)
    assert count == 2
    assert _lines(_first_data_sector(layout))[1:] == ROWS[:2]


def test_insert_n_rows_rejects_non_positive(built):
    manager, _ = built
    layout = manager.layout
    with pytest.raises(ValueError):
        insert_n_rows_from_csv(manager, layout.csv_titanic, layout.block_routes, 20, 0)


def test_insert_all_rows_reduces_free_capacity(built):
    manager, _ = built
    layout = manager.layout
    before = manager.free_capacity()
    count = insert_all_rows_from_csv(manager, layout.csv_titanic, layout.block_routes, 20)
    assert count == len(ROWS)
    assert manager.free_capacity() == before - 20 * len(ROWS)


def test_use_default_disk(layout):
    disk = Disk()
    manager = StorageManager(layout=layout)
    use_default_disk(manager, disk)
    assert disk.plates == 8
    assert manager.sectors_per_block == 4
    assert manager.total_blocks == disk.total_sectors // 4
    routes = _lines(layout.routes)
    blocks = _lines(layout.block_routes)
    assert len(routes) + len(blocks) == disk.total_sectors
    assert not layout.block_info.exists()


def test_main_invalid_then_exit(tmp_path, monkeypatch, capsys):
    answers = iter(["9", "8"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    assert main(["--root", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "Opción no válida. Intente nuevamente." in out
    assert "Hasta luego" in out


def test_main_stops_at_end_of_input(tmp_path, monkeypatch):
    def no_more(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", no_more)
    assert main(["--root", str(tmp_path)]) == 0