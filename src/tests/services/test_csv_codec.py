"""
Tests for the migration package CSV codec.

Tests cover:
- Field quoting on write
- Quoted fields, doubled quotes and embedded line breaks on read
- Record terminators (CRLF, LF, lone CR)
- Blank line suppression and unterminated quotes
- BOM handling in files
"""

from pathlib import Path

import pytest

from src.services.package_exchange.csv_codec import (
    FILE_ENCODING,
    format_field,
    read_csv_file,
    read_records,
    write_csv_file,
    write_records,
)


# ============================================================================
# Writing
# ============================================================================


class TestFormatField:
    """Tests for quoting of single fields."""

    def test_plain_field_not_quoted(self):
        assert format_field("ART01") == "ART01"

    def test_none_is_empty(self):
        assert format_field(None) == ""

    def test_separator_forces_quotes(self):
        assert format_field("a;b") == '"a;b"'

    def test_inner_quotes_doubled(self):
        assert format_field('say "hi"') == '"say ""hi"""'

    @pytest.mark.parametrize("value", ["line1\nline2", "line1\rline2", "a\r\nb"])
    def test_line_breaks_force_quotes(self, value):
        assert format_field(value) == f'"{value}"'

    def test_comma_not_quoted_with_semicolon_separator(self):
        assert format_field("1,5") == "1,5"


class TestWriteRecords:
    """Tests for record serialization."""

    def test_records_end_with_crlf(self):
        text = write_records([["Codice", "Note"], ["A01", ""]])
        assert text == "Codice;Note\r\nA01;\r\n"

    def test_none_fields_written_empty(self):
        assert write_records([["A", None, "B"]]) == "A;;B\r\n"


# ============================================================================
# Reading
# ============================================================================


class TestReadRecords:
    """Tests for the CSV reader state machine."""

    def test_simple_records(self):
        assert read_records("a;b\r\nc;d\r\n") == [["a", "b"], ["c", "d"]]

    def test_lf_and_lone_cr_terminate_records(self):
        assert read_records("a\nb\rc") == [["a"], ["b"], ["c"]]

    def test_missing_final_terminator(self):
        assert read_records("a;b") == [["a", "b"]]

    def test_quoted_separator_and_newline(self):
        rows = read_records('"x;y";"line1\r\nline2"\r\n')
        assert rows == [["x;y", "line1\r\nline2"]]

    def test_doubled_quote_is_literal(self):
        assert read_records('"say ""hi"""\r\n') == [['say "hi"']]

    def test_blank_lines_dropped(self):
        assert read_records("a\r\n\r\n\r\nb\r\n") == [["a"], ["b"]]

    def test_record_of_empty_fields_kept(self):
        assert read_records(";\r\n") == [["", ""]]

    def test_unterminated_quote_closed_at_end(self):
        assert read_records('a;"open field') == [["a", "open field"]]

    def test_bom_stripped(self):
        assert read_records("\ufeffCodice;Note\r\n") == [["Codice", "Note"]]

    def test_fields_not_trimmed(self):
        assert read_records(" a ; b ") == [[" a ", " b "]]

    def test_empty_text(self):
        assert read_records("") == []

    def test_quoting_round_trip_is_byte_identical(self):
        rows = [["Codice", "Note"], ["A01", 'x;y "quoted"\r\nnext line']]
        text = write_records(rows)
        assert read_records(text) == rows
        assert write_records(read_records(text)) == text


# ============================================================================
# Files
# ============================================================================


class TestCsvFiles:
    """Tests for package file helpers."""

    def test_written_file_starts_with_bom(self, tmp_path):
        path = tmp_path / "01_agenti.csv"
        count = write_csv_file(path, ["Codice", "Nome"], [["AG01", "Mario"]])

        assert count == 1
        raw = path.read_bytes()
        assert raw.startswith(b"\xef\xbb\xbf")
        assert raw.endswith(b"AG01;Mario\r\n")

    def test_read_back(self, tmp_path):
        path = tmp_path / "01_agenti.csv"
        write_csv_file(path, ["Codice", "Nome"], [["AG01", "Mario"], ["AG02", None]])

        table = read_csv_file(path)

        assert table.header == ["Codice", "Nome"]
        assert table.rows == [["AG01", "Mario"], ["AG02", ""]]

    def test_missing_file_returns_none(self, tmp_path):
        assert read_csv_file(tmp_path / "absent.csv") is None

    def test_empty_file_has_no_header(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_bytes(b"")

        table = read_csv_file(path)

        assert table is not None
        assert table.header == []
        assert len(table) == 0

    def test_file_without_bom_is_read(self, tmp_path):
        path = Path(tmp_path) / "plain.csv"
        path.write_bytes("Codice\r\nA01\r\n".encode("utf-8"))

        table = read_csv_file(path)

        assert table.header == ["Codice"]
        assert table.rows == [["A01"]]

    def test_non_ascii_text_preserved(self, tmp_path):
        path = tmp_path / "06_clienti.csv"
        write_csv_file(path, ["Codice", "Citta"], [["C1", "Forlì-Cesena"]])

        assert "Forlì-Cesena" in path.read_text(encoding=FILE_ENCODING)
        assert read_csv_file(path).rows == [["C1", "Forlì-Cesena"]]
