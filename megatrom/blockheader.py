"""Parsing and in-place updating of the fixed-width sector headers."""

from __future__ import annotations

import re
from pathlib import Path
from typing import BinaryIO, Callable, Iterable

from megatrom.csvtools import split

HEADER_OVERHEAD = 17
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_int(text: str) -> int:
    """Read a leading integer the way a lenient string-to-int conversion does."""
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"number out of range: {text!r}")
    return value


def parse_fields(line: str) -> list[str]:
    """Split a '#'-separated line into its fields."""
    return split(line, "#")


def to_ints(values: Iterable[str]) -> list[int]:
    """Convert strings to integers, dropping the ones that are not numbers."""
    result = []
    for value in values:
        try:
            result.append(_parse_int(value))
        except ValueError:
            continue
    return result


def parse_int_fields(line: str) -> list[int]:
    """Split a '#'-separated line into integers, using 0 for non-numeric fields."""
    result = []
    for field in parse_fields(line):
        try:
            result.append(_parse_int(field))
        except ValueError:
            result.append(0)
    return result


def field_offset(sizes: list[int], index: int) -> int:
    """Byte offset of a header field: preceding widths plus one separator each."""
    return sum(size + 1 for size in sizes[:index])


def write_header_field(handle: BinaryIO, index: int, value: int, sizes: list[int]) -> None:
    """Overwrite one zero-padded header field in a file opened for binary update."""
    width = sizes[index]
    text = str(value).rjust(width, "0")
    if len(text) > width:
        raise ValueError(
            f"El valor excede el espacio reservado en el campo {index}: {value}"
        )
    handle.seek(field_offset(sizes, index))
    handle.write(text.encode("ascii"))


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _read_sizes(schema_path: str | Path) -> list[int]:
    with open(schema_path, encoding="utf-8", newline="") as handle:
        line = handle.readline().removesuffix("\n")
    return [_parse_int(field) for field in parse_fields(line)]


def _update(
    record_size: int,
    sector_path: str | Path,
    schema_path: str | Path,
    limit: Callable[[], int],
    verbose: bool,
) -> bool:
    sizes = _read_sizes(schema_path)
    with open(sector_path, "r+b") as handle:
        line = handle.readline().decode("utf-8").removesuffix("\n")
        fields = parse_fields(line)
        if len(fields) < 5:
            raise ValueError(f"Cabecera del sector con formato inválido: {line!r}")
        values = [_parse_int(field) for field in fields[:5]]

        values[0] += record_size
        values[2] = record_size
        values[3] += 1
        values[4] = limit()

        if verbose:
            print(" ".join(str(v) for v in values))

        if values[3] > values[4]:
            print("bloque ya no puede insertar mas valores")
            return False

        for index in (0, 2, 3, 4):
            write_header_field(handle, index, values[index], sizes)
    return True


def update_header(
    record_size: int,
    sector_path: str | Path,
    sector_capacity: int,
    schema_path: str | Path,
) -> bool:
    """Account for one more record in a data sector's header.

    Returns False, leaving the header untouched, when the sector cannot take
    another record of this size.
    """
    return _update(
        record_size,
        sector_path,
        schema_path,
        lambda: _trunc_div(sector_capacity - HEADER_OVERHEAD, record_size),
        verbose=False,
    )


def update_header_block(
    record_size: int,
    sector_path: str | Path,
    sectors_per_block: int,
    schema_path: str | Path,
) -> bool:
    """Account for one more sector route in a block's header.

    Returns False, leaving the header untouched, when the block already lists
    as many sectors as it may hold.
    """
    return _update(
        record_size,
        sector_path,
        schema_path,
        lambda: sectors_per_block,
        verbose=True,
    )