"""
Tests for the CSV codec.

Covers:
- Line parsing with quoting and doubled-quote escapes
- The permissive mid-field quote behaviour
- Document parsing (blank lines, CRLF, BOM, short rows)
- Positional vs header-name column mapping
- Value and document serialization
"""

import pytest

from chargelog.schema import SCHEMA
from chargelog.utils.csv_codec import (
    BOM,
    HEADER_MODE_HEADER,
    build_column_map,
    header_mode_or_default,
    parse_document,
    parse_line,
    serialize_document,
    serialize_value,
)
from tests.factories import SAMPLE_CSV


def _row(**values):
    row = {name: "" for name in SCHEMA}
    row.update(values)
    return row


class TestParseLine:
    """Tests for splitting a single line into fields."""

    def test_plain_fields(self):
        assert parse_line("a,b,c") == ["a", "b", "c"]

    def test_empty_fields(self):
        assert parse_line(",,") == ["", "", ""]

    def test_quoted_comma(self):
        assert parse_line('a,"b,c",d') == ["a", "b,c", "d"]

    def test_doubled_quote_escape(self):
        assert parse_line('"He said ""hi"""') == ['He said "hi"']

    def test_empty_quoted_field(self):
        assert parse_line('"",x') == ["", "x"]

    def test_quote_mid_field_opens_quoted_region(self):
        """Quotes need not sit at field boundaries"""
        assert parse_line('ab"c,d"e,f') == ["abc,de", "f"]

    def test_unterminated_quote_runs_to_end(self):
        assert parse_line('a,"b,c') == ["a", "b,c"]

    def test_whitespace_preserved(self):
        assert parse_line(" a , b ") == [" a ", " b "]


class TestParseDocument:
    """Tests for parsing whole documents."""

    def test_sample_document(self):
        rows = parse_document(SAMPLE_CSV)

        assert len(rows) == 2
        assert rows[0]["Date"] == "2024-03-01"
        assert rows[0]["Fully-Charged"] == "yes"
        assert rows[1]["Location"] == "Mall, Level 2"
        assert rows[1]["Remarks"] == 'said "busy"'
        assert list(rows[0]) == list(SCHEMA)

    def test_empty_text(self):
        assert parse_document("") == []

    def test_header_only(self):
        assert parse_document("Date,Location\n") == []

    def test_blank_lines_discarded(self):
        text = "h\n\n2024-01-01,Home\n   \n2024-01-02,Work\n"
        rows = parse_document(text)
        assert [r["Date"] for r in rows] == ["2024-01-01", "2024-01-02"]

    def test_crlf_line_endings(self):
        rows = parse_document("h\r\n2024-01-01,Home\r\n2024-01-02,Work\r\n")
        assert [r["Location"] for r in rows] == ["Home", "Work"]

    def test_lone_carriage_return_kept_in_field(self):
        text = serialize_document([{"Date": "2024-01-01", "Remarks": "a\rb"}])
        rows = parse_document(text)
        assert len(rows) == 1
        assert rows[0]["Remarks"] == "a\rb"

    def test_short_row_padded(self):
        rows = parse_document("h\n2024-01-01,Home")
        assert rows[0]["Location"] == "Home"
        assert rows[0]["Remarks"] == ""
        assert len(rows[0]) == len(SCHEMA)

    def test_extra_columns_dropped(self):
        line = ",".join(["x"] * (len(SCHEMA) + 3))
        rows = parse_document("h\n" + line)
        assert len(rows[0]) == len(SCHEMA)

    def test_positional_ignores_header_text(self):
        """A typo in the header does not shift data"""
        rows = parse_document("Dtae,Locaton\n2024-01-01,Home")
        assert rows[0]["Date"] == "2024-01-01"
        assert rows[0]["Location"] == "Home"

    def test_first_line_is_always_header(self):
        """Even a line that looks like data is consumed as the header"""
        rows = parse_document("2024-01-01,Home\n2024-01-02,Work")
        assert len(rows) == 1
        assert rows[0]["Date"] == "2024-01-02"

    def test_bom_stripped(self):
        rows = parse_document(BOM + "Date,Location\n2024-01-01,Home")
        assert rows[0]["Date"] == "2024-01-01"

    def test_header_mode_maps_by_name(self):
        text = "Location, date ,Colour\nHome,2024-01-01,red"
        rows = parse_document(text, header_mode=HEADER_MODE_HEADER)

        assert rows[0]["Date"] == "2024-01-01"
        assert rows[0]["Location"] == "Home"
        assert "Colour" not in rows[0]
        assert rows[0]["Remarks"] == ""

    def test_unknown_header_mode(self):
        with pytest.raises(ValueError):
            parse_document("a\nb", header_mode="fuzzy")


class TestBuildColumnMap:
    """Tests for column to field mapping."""

    def test_positional(self):
        column_map = build_column_map(["anything"])
        assert column_map[0] == "Date"
        assert column_map[len(SCHEMA) - 1] == "Remarks"

    def test_header_duplicate_column_uses_first(self):
        column_map = build_column_map(["Date", "Date"], HEADER_MODE_HEADER)
        assert column_map == {0: "Date"}


class TestHeaderModeOrDefault:

    def test_default(self):
        assert header_mode_or_default(None) == "positional"

    def test_normalised(self):
        assert header_mode_or_default(" Header ") == "header"

    def test_invalid(self):
        with pytest.raises(ValueError):
            header_mode_or_default("columns")


class TestSerializeValue:
    """Tests for quoting single values."""

    def test_comma(self):
        assert serialize_value("a,b") == '"a,b"'

    def test_quote(self):
        assert serialize_value('He said "hi"') == '"He said ""hi"""'

    def test_plain(self):
        assert serialize_value("plain") == "plain"

    def test_newline(self):
        assert serialize_value("line1\nline2") == '"line1\nline2"'

    def test_carriage_return(self):
        assert serialize_value("a\rb") == '"a\rb"'

    def test_none(self):
        assert serialize_value(None) == ""

    def test_number(self):
        assert serialize_value(12.5) == "12.5"


class TestSerializeDocument:
    """Tests for building CSV documents."""

    def test_header_always_present(self):
        text = serialize_document([])
        assert text == ",".join(SCHEMA)

    def test_fields_in_schema_order(self):
        text = serialize_document([_row(Remarks="last", Date="first")])
        lines = text.split("\n")

        assert len(lines) == 2
        values = parse_line(lines[1])
        assert values[0] == "first"
        assert values[-1] == "last"

    def test_missing_fields_written_empty(self):
        text = serialize_document([{"Date": "2024-01-01"}])
        assert text.split("\n")[1] == "2024-01-01" + "," * (len(SCHEMA) - 1)

    def test_lines_joined_with_lf(self):
        text = serialize_document([_row(), _row()])
        assert "\r" not in text
        assert text.count("\n") == 2

    def test_bom_variant(self):
        text = serialize_document([_row(Date="2024-01-01")], include_bom=True)
        assert text.startswith(BOM)
        assert text[len(BOM):] == serialize_document([_row(Date="2024-01-01")])

    def test_round_trip(self):
        records = [
            _row(Date="2024-01-01", Location="Mall, Level 2", Remarks='said "ok"'),
            _row(Date="2024-01-02", **{"Charging-Fee": "$1,234.56"}),
            _row(),
        ]
        assert parse_document(serialize_document(records)) == records

    def test_round_trip_sample(self):
        rows = parse_document(SAMPLE_CSV)
        assert parse_document(serialize_document(rows)) == rows
