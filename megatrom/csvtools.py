"""CSV inspection and relation-schema building."""

from __future__ import annotations

from pathlib import Path

_WHITESPACE = " \t\r\n"


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _read_lines(path: str | Path) -> list[str]:
    """Lines of a text file without their trailing newline, as a stream reader sees them."""
    with open(path, encoding="utf-8", newline="") as handle:
        return [line.removesuffix("\n") for line in handle]


def _first_line(path: str | Path) -> str:
    lines = _read_lines(path)
    return lines[0] if lines else ""


def longest_record_length(path: str | Path, skip_header: bool) -> int:
    """Length in bytes of the longest line, optionally ignoring the first one."""
    lines = _read_lines(path)
    if skip_header:
        lines = lines[1:]
    return max((_byte_length(line) for line in lines), default=0)


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line on commas that are not inside double quotes.

    Quotes toggle the quoted state and are dropped; a quote preceded by a
    backslash is kept as an ordinary character.
    """
    fields: list[str] = []
    current: list[str] = []
    quoted = False
    previous = ""
    for char in line:
        if char == '"' and previous != "\\":
            quoted = not quoted
        elif char == "," and not quoted:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        previous = char
    fields.append("".join(current))
    return fields


def find_max_lengths(input_path: str | Path, output_path: str | Path) -> list[int]:
    """Write the longest field length of every column, '#'-separated, and return them.

    The first line is a header and blank lines are ignored.
    """
    lines = _read_lines(input_path)
    longest: list[str] = []
    for line in lines[1:]:
        if not line:
            continue
        for index, value in enumerate(split_csv_line(line)):
            if index >= len(longest):
                longest.append(value)
            elif _byte_length(value) > _byte_length(longest[index]):
                longest[index] = value
    lengths = [_byte_length(value) for value in longest]
    Path(output_path).write_text("#".join(str(n) for n in lengths), encoding="utf-8")
    return lengths


def split(line: str, delimiter: str) -> list[str]:
    """Split on a delimiter; a trailing empty piece is not a field."""
    parts = line.split(delimiter)
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def clean(text: str) -> str:
    """Strip spaces, tabs and line breaks from both ends."""
    return text.strip(_WHITESPACE)


def build_schema(
    attributes_path: str | Path,
    types_path: str | Path,
    lengths_path: str | Path,
    relation: str,
    output_path: str | Path,
) -> str:
    """Combine attribute names, types and lengths into one schema line and save it.

    The attributes come from the first line of a CSV file (comma-separated),
    types and lengths from the first line of '#'-separated files. The result
    is ``relation#attr#type#length#...``.
    """
    attributes = [clean(a) for a in split(_first_line(attributes_path), ",")]
    types = [clean(t) for t in split(_first_line(types_path), "#")]
    lengths = [clean(n) for n in split(_first_line(lengths_path), "#")]

    if not (len(attributes) == len(types) == len(lengths)):
        raise ValueError(
            "Cantidad inconsistente de atributos, tipos o longitudes: "
            f"{len(attributes)}, {len(types)}, {len(lengths)}"
        )

    schema = relation + "".join(
        f"#{name}#{kind}#{length}"
        for name, kind, length in zip(attributes, types, lengths)
    )
    Path(output_path).write_text(schema, encoding="utf-8")
    print(f"Esquema guardado correctamente en: {output_path}")
    return schema