"""
Tests for header normalization, record lookup and cell value conversion.

Tests cover:
- Header normalization (case, separators, accented vowels)
- HeaderMap first-occurrence rule and Record.get aliases
- Canonical formatting of decimals, dates and booleans
- Lenient parsing of Italian-style numbers, dates and booleans
- Fingerprint normalization of model and parsed values
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.services.package_exchange.records import (
    CsvTable,
    HeaderMap,
    Record,
    normalize_header,
)
from src.services.package_exchange.values import (
    BOOLEAN,
    DATE,
    DECIMAL,
    INTEGER,
    TEXT,
    fingerprint_part,
    format_bool,
    format_date,
    format_decimal,
    parse_bool,
    parse_date,
    parse_decimal,
    parse_int,
    parse_value,
)


# ============================================================================
# Headers and records
# ============================================================================


class TestNormalizeHeader:
    """Tests for column name normalization."""

    @pytest.mark.parametrize(
        "raw",
        ["RagioneSociale", "ragione_sociale", "Ragione Sociale", "RAGIONE-SOCIALE", " ragionesociale "],
    )
    def test_variants_normalize_alike(self, raw):
        assert normalize_header(raw) == "ragionesociale"

    def test_accented_vowels_folded(self):
        assert normalize_header("Città") == normalize_header("Citta")
        assert normalize_header("QUANTITÀ") == "quantita"

    def test_blank_and_none(self):
        assert normalize_header("   ") == ""
        assert normalize_header(None) == ""


class TestHeaderMap:
    """Tests for header position lookup."""

    def test_first_occurrence_wins(self):
        header_map = HeaderMap(["Codice", "Note", "codice"])
        assert header_map.position("CODICE") == 0

    def test_blank_headers_ignored(self):
        header_map = HeaderMap(["Codice", "", "  ", "Note"])
        assert len(header_map) == 2
        assert header_map.position("Note") == 3

    def test_contains(self):
        header_map = HeaderMap(["Codice"])
        assert "codice" in header_map
        assert "Note" not in header_map


class TestRecord:
    """Tests for Record.get."""

    def _record(self, header, values):
        return Record(HeaderMap(header), values)

    def test_value_trimmed(self):
        record = self._record(["Codice"], ["  A01  "])
        assert record.get("Codice") == "A01"

    def test_whitespace_only_is_none(self):
        record = self._record(["Codice", "Note"], ["A01", "   "])
        assert record.get("Note") is None

    def test_absent_column_is_none(self):
        record = self._record(["Codice"], ["A01"])
        assert record.get("Note") is None

    def test_short_row_is_none(self):
        record = self._record(["Codice", "Note"], ["A01"])
        assert record.get("Note") is None

    def test_first_present_alias_used(self):
        record = self._record(["PIVA"], ["IT01234567890"])
        assert record.get("PartitaIVA", "PIVA") == "IT01234567890"

    def test_alias_lookup_stops_at_first_present_column(self):
        # The first alias present in the header decides, even when blank
        record = self._record(["PartitaIVA", "PIVA"], ["", "IT01234567890"])
        assert record.get("PartitaIVA", "PIVA") is None

    def test_table_records_numbered_after_header(self):
        table = CsvTable(["Codice"], [["A"], ["B"]])
        records = list(table.records())
        assert [r.row_number for r in records] == [2, 3]
        assert records[1].get("Codice") == "B"


# ============================================================================
# Formatting
# ============================================================================


class TestFormatting:
    """Tests for canonical cell formatting."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("12.5000"), "12.5"),
            (Decimal("100.0000"), "100"),
            (Decimal("0.0000"), "0"),
            (Decimal("-3.2500"), "-3.25"),
            (Decimal("0.0015"), "0.0015"),
            (22, "22"),
        ],
    )
    def test_format_decimal(self, value, expected):
        assert format_decimal(value) == expected

    def test_format_date(self):
        assert format_date(date(2024, 3, 1)) == "2024-03-01"
        assert format_date(datetime(2024, 3, 1, 15, 30)) == "2024-03-01"

    def test_format_bool(self):
        assert format_bool(True) == "1"
        assert format_bool(False) == "0"

    def test_none_formats_as_none(self):
        assert format_decimal(None) is None
        assert format_date(None) is None
        assert format_bool(None) is None


# ============================================================================
# Parsing
# ============================================================================


class TestParsing:
    """Tests for lenient cell parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("12.5", Decimal("12.5")),
            ("12,5", Decimal("12.5")),
            ("1.234,56", Decimal("1234.56")),
            ("1,234.56", Decimal("1234.56")),
            ("1.234.567", Decimal("1234567")),
            (" -7 ", Decimal("-7")),
        ],
    )
    def test_parse_decimal(self, raw, expected):
        assert parse_decimal(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "NaN", "Infinity", "1,2,3.4.5x"])
    def test_parse_decimal_rejects(self, raw):
        with pytest.raises(ValueError):
            parse_decimal(raw)

    def test_parse_int(self):
        assert parse_int(" 42 ") == 42
        with pytest.raises(ValueError):
            parse_int("4.2")

    @pytest.mark.parametrize("raw", ["1", "true", "TRUE", "S", "si", "SI", "Sì"])
    def test_parse_bool_true(self, raw):
        assert parse_bool(raw) is True

    @pytest.mark.parametrize("raw", ["0", "false", "N", "no", "NO"])
    def test_parse_bool_false(self, raw):
        assert parse_bool(raw) is False

    def test_parse_bool_rejects(self):
        with pytest.raises(ValueError):
            parse_bool("forse")

    @pytest.mark.parametrize(
        "raw",
        ["2024-03-01", "2024-03-01T10:15:00", "2024-03-01T10:15:00Z", "01/03/2024", "01-03-2024", "01.03.2024"],
    )
    def test_parse_date(self, raw):
        assert parse_date(raw) == date(2024, 3, 1)

    def test_parse_date_rejects(self):
        with pytest.raises(ValueError):
            parse_date("31/02/2024")

    def test_parse_value_blank_is_none(self):
        for kind in (TEXT, DECIMAL, INTEGER, BOOLEAN, DATE):
            assert parse_value(kind, "  ") is None
            assert parse_value(kind, None) is None

    def test_parse_value_dispatch(self):
        assert parse_value(TEXT, "  Vite ") == "Vite"
        assert parse_value(DECIMAL, "0,15") == Decimal("0.15")
        assert parse_value(BOOLEAN, "S") is True


# ============================================================================
# Fingerprint parts
# ============================================================================


class TestFingerprintPart:
    """Tests for fingerprint normalization."""

    def test_stored_and_parsed_decimals_agree(self):
        assert fingerprint_part(Decimal("5.0000")) == fingerprint_part(parse_decimal("5,00"))

    def test_dates_iso(self):
        assert fingerprint_part(date(2024, 1, 31)) == "2024-01-31"

    def test_bool_before_int(self):
        assert fingerprint_part(True) == "1"

    def test_none_and_text(self):
        assert fingerprint_part(None) == ""
        assert fingerprint_part("  LOT-1 ") == "LOT-1"
        assert fingerprint_part(17) == "17"
