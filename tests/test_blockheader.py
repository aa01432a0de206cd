import pytest

from megatrom.blockheader import (
    field_offset,
    parse_fields,
    parse_int_fields,
    to_ints,
    update_header,
    update_header_block,
    write_header_field,
)


@pytest.fixture
def schema(tmp_path):
    path = tmp_path / "schema.txt"
    path.write_text("4#1#4#3#3\n")
    return path


def _sector(tmp_path, header):
    path = tmp_path / "sector1.txt"
    path.write_text(header + "\n")
    return path


def _header(path):
    return path.read_text().split("\n")[0]


def test_parse_fields():
    assert parse_fields("a#b#c") == ["a", "b", "c"]
    assert parse_fields("a##c#") == ["a", "", "c"]


def test_to_ints_skips_invalid():
    assert to_ints(["1", "x", "12abc", " 7", "99999999999"]) == [1, 12, 7]


def test_parse_int_fields_uses_zero_for_invalid():
    assert parse_int_fields("1#x#3") == [1, 0, 3]


def test_field_offset_invariants():
    sizes = [4, 1, 4, 3, 3]
    assert field_offset(sizes, 0) == 0
    for index in range(len(sizes) - 1):
        step = field_offset(sizes, index + 1) - field_offset(sizes, index)
        assert step == sizes[index] + 1


def test_write_header_field(tmp_path):
    path = tmp_path / "f.txt"
    path.write_bytes(b"0000#0#0000")
    with open(path, "r+b") as handle:
        write_header_field(handle, 2, 12, [4, 1, 4])
    assert path.read_bytes() == b"0000#0#0012"


def test_write_header_field_overflow(tmp_path):
    path = tmp_path / "f.txt"
    path.write_bytes(b"0000#0#0000")
    with open(path, "r+b") as handle:
        with pytest.raises(ValueError):
            write_header_field(handle, 2, 12345, [4, 1, 4])
    assert path.read_bytes() == b"0000#0#0000"


def test_update_header(tmp_path, schema):
    sector = _sector(tmp_path, "0000#0#0000#000#000")
    assert update_header(100, sector, 1024, schema) is True
    assert _header(sector) == "0100#0#0100#001#010"


def test_update_header_accumulates(tmp_path, schema):
    sector = _sector(tmp_path, "0000#0#0000#000#000")
    assert update_header(100, sector, 1024, schema) is True
    assert update_header(100, sector, 1024, schema) is True
    values = parse_int_fields(_header(sector))
    assert values[0] == 200
    assert values[2] == 100
    assert values[3] == 2


def test_update_header_full_sector_unchanged(tmp_path, schema):
    header = "1000#0#0100#010#010"
    sector = _sector(tmp_path, header)
    assert update_header(100, sector, 1024, schema) is False
    assert _header(sector) == header


def test_update_header_bad_header(tmp_path, schema):
    sector = _sector(tmp_path, "0000#0")
    with pytest.raises(ValueError):
        update_header(100, sector, 1024, schema)


def test_update_header_missing_sector(tmp_path, schema):
    with pytest.raises(FileNotFoundError):
        update_header(100, tmp_path / "missing.txt", 1024, schema)


def test_update_header_block_until_full(tmp_path, schema):
    sector = _sector(tmp_path, "0000#0#0000#003#000")
    assert update_header_block(50, sector, 4, schema) is True
    values = parse_int_fields(_header(sector))
    assert values[3] == 4
    assert values[4] == 4
    assert values[0] == 50
    before = _header(sector)
    assert update_header_block(50, sector, 4, schema) is False
    assert _header(sector) == before


def test_update_header_keeps_body(tmp_path, schema):
    sector = tmp_path / "sector.txt"
    sector.write_text("0000#0#0000#000#000\nrecord line\n")
    assert update_header_block(30, sector, 4, schema) is True
    assert sector.read_text().split("\n")[1] == "record line"