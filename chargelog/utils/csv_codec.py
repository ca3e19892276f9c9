"""
CSV encoding and decoding for charging records.

The parser is deliberately permissive rather than strict RFC 4180: a quote
character anywhere outside a quoted region opens one, so `ab"c,d"e` is the
single field `abc,de`. Records are split on line boundaries before fields
are parsed, so values containing newlines do not survive a round trip.
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..schema import SCHEMA

HEADER_MODE_POSITIONAL = "positional"
HEADER_MODE_HEADER = "header"
HEADER_MODES = (HEADER_MODE_POSITIONAL, HEADER_MODE_HEADER)

BOM = "\ufeff"

_LINE_BREAK = re.compile(r"\r?\n")
_NEEDS_QUOTING = re.compile(r'[",\r\n]')


def parse_line(line: str) -> List[str]:
    """
    Split one CSV line into fields.

    Examples:
        >>> parse_line('a,"b,c",d')
        ['a', 'b,c', 'd']
        >>> parse_line('"He said ""hi"" twice"')
        ['He said "hi" twice']
    """
    fields = []
    current = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        ch = line[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < length and line[i + 1] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(ch)
        elif ch == '"':
            in_quotes = True
        elif ch == ',':
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current))
    return fields


def split_lines(text: str) -> List[str]:
    """Split text on CRLF or LF and drop blank lines; a lone CR stays in the line."""
    if text.startswith(BOM):
        text = text[len(BOM):]
    return [line for line in _LINE_BREAK.split(text) if line.strip()]


def build_column_map(
    header: Sequence[str],
    header_mode: str = HEADER_MODE_POSITIONAL,
    schema: Sequence[str] = SCHEMA
) -> Dict[int, str]:
    """
    Map column positions to schema field names.

    Positional mode ignores the header text and pairs columns with the schema
    in order. Header mode matches header names (trimmed, case-insensitive)
    and leaves unknown columns unmapped.
    """
    if header_mode not in HEADER_MODES:
        raise ValueError(f"Unknown header mode: {header_mode!r}")

    if header_mode == HEADER_MODE_POSITIONAL:
        return {idx: name for idx, name in enumerate(schema)}

    by_name = {name.lower(): name for name in schema}
    column_map = {}
    for idx, column in enumerate(header):
        field = by_name.get(column.strip().lower())
        if field is not None and field not in column_map.values():
            column_map[idx] = field
    return column_map


def row_to_fields(
    values: Sequence[str],
    column_map: Mapping[int, str],
    schema: Sequence[str] = SCHEMA
) -> Dict[str, str]:
    """Build a schema-ordered mapping; missing columns become ""."""
    row = {name: "" for name in schema}
    for idx, field in column_map.items():
        if idx < len(values):
            row[field] = values[idx]
    return row


def parse_document(
    text: str,
    header_mode: str = HEADER_MODE_POSITIONAL,
    schema: Sequence[str] = SCHEMA
) -> List[Dict[str, str]]:
    """
    Parse a CSV document into field mappings.

    The first non-blank line is always the header and never becomes a row.

    Args:
        text: CSV text
        header_mode: "positional" (default) or "header"
        schema: Field names, in column order

    Returns:
        One mapping per data line, keyed by schema field
    """
    lines = split_lines(text)
    if not lines:
        return []

    column_map = build_column_map(parse_line(lines[0]), header_mode, schema)
    return [row_to_fields(parse_line(line), column_map, schema) for line in lines[1:]]


def serialize_value(value: Any) -> str:
    """
    Quote a value for CSV output when it contains a comma, quote or newline.

    Examples:
        >>> serialize_value('a,b')
        '"a,b"'
        >>> serialize_value('plain')
        'plain'
    """
    if value is None:
        return ""
    text = str(value)
    if _NEEDS_QUOTING.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def serialize_row(values: Iterable[Any]) -> str:
    return ",".join(serialize_value(value) for value in values)


def serialize_document(
    records: Iterable[Mapping[str, Any]],
    schema: Sequence[str] = SCHEMA,
    include_bom: bool = False
) -> str:
    """
    Serialize field mappings to CSV text with a header line.

    Args:
        records: Field mappings; missing fields are written empty
        schema: Field names, in column order
        include_bom: Prefix a UTF-8 BOM so spreadsheets detect the encoding

    Returns:
        CSV text, lines joined by "\\n"
    """
    lines = [serialize_row(schema)]
    for record in records:
        lines.append(serialize_row(record.get(name) for name in schema))

    text = "\n".join(lines)
    return BOM + text if include_bom else text


def header_mode_or_default(value: Optional[str], default: str = HEADER_MODE_POSITIONAL) -> str:
    """Normalise a user-supplied header mode, falling back to the default."""
    if not value:
        return default
    value = value.strip().lower()
    if value not in HEADER_MODES:
        raise ValueError(f"Unknown header mode: {value!r}")
    return value
