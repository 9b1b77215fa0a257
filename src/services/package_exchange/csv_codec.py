"""
CSV codec for migration package files.

Package files are UTF-8 with a byte order mark, use ';' as field separator,
end every record with CRLF and quote fields RFC4180-style. The reader is a
small two-state machine that tolerates malformed input instead of failing:
an unterminated quote at end of input simply closes the field.

Usage:
    from src.services.package_exchange.csv_codec import read_records, write_records

    text = write_records([["Codice", "Note"], ["A01", 'say "hi"; bye']])
    rows = read_records(text)
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from src.utils.constants import PACKAGE_SEPARATOR
from .records import CsvTable

# Written with a BOM; the "-sig" codec also strips one on read when present
FILE_ENCODING = "utf-8-sig"
RECORD_TERMINATOR = "\r\n"

_QUOTE = '"'
_BOM = "\ufeff"


# ============================================================================
# Writing
# ============================================================================


def format_field(value: Optional[str], separator: str = PACKAGE_SEPARATOR) -> str:
    """
    Render one field, quoting it only when needed.

    A field is quoted when it contains the separator, a double quote, CR or
    LF. Inner quotes are doubled. None renders as an empty field.
    """
    if value is None:
        return ""
    text = str(value)
    if (
        separator in text
        or _QUOTE in text
        or "\r" in text
        or "\n" in text
    ):
        return _QUOTE + text.replace(_QUOTE, _QUOTE * 2) + _QUOTE
    return text


def format_record(fields: Sequence[Optional[str]], separator: str = PACKAGE_SEPARATOR) -> str:
    """Render one record without its terminator."""
    return separator.join(format_field(f, separator) for f in fields)


def write_records(
    rows: Iterable[Sequence[Optional[str]]],
    separator: str = PACKAGE_SEPARATOR,
) -> str:
    """
    Serialize records to CSV text.

    Args:
        rows: Records as sequences of strings (None for empty fields)
        separator: Field separator

    Returns:
        CSV text, every record terminated by CRLF
    """
    return "".join(format_record(row, separator) + RECORD_TERMINATOR for row in rows)


# ============================================================================
# Reading
# ============================================================================


def read_records(text: str, separator: str = PACKAGE_SEPARATOR) -> List[List[str]]:
    """
    Parse CSV text into records.

    Outside quotes: a quote enters quoted mode, the separator ends the field,
    CR (optionally followed by LF) or a lone LF ends the record. Inside
    quotes: a doubled quote is a literal quote, a single quote leaves quoted
    mode, anything else (separators and line breaks included) is data.

    Records consisting of a single empty field (blank lines) are dropped.

    Args:
        text: CSV text, with or without a leading BOM
        separator: Field separator

    Returns:
        List of records, each a list of raw (untrimmed) field values
    """
    if text.startswith(_BOM):
        text = text[1:]

    records: List[List[str]] = []
    record: List[str] = []
    field: List[str] = []
    in_quotes = False

    def end_record():
        record.append("".join(field))
        field.clear()
        if len(record) > 1 or record[0]:
            records.append(list(record))
        record.clear()

    i = 0
    length = len(text)
    while i < length:
        c = text[i]
        i += 1

        if in_quotes:
            if c == _QUOTE:
                if i < length and text[i] == _QUOTE:
                    field.append(_QUOTE)
                    i += 1
                else:
                    in_quotes = False
                continue
            field.append(c)
            continue

        if c == _QUOTE:
            in_quotes = True
        elif c == separator:
            record.append("".join(field))
            field.clear()
        elif c == "\r":
            if i < length and text[i] == "\n":
                i += 1
            end_record()
        elif c == "\n":
            end_record()
        else:
            field.append(c)

    # End of input closes whatever is pending, an open quote included
    end_record()
    return records


# ============================================================================
# Files
# ============================================================================


def write_csv_file(
    path: Path,
    header: Sequence[str],
    rows: Iterable[Sequence[Optional[str]]],
    separator: str = PACKAGE_SEPARATOR,
) -> int:
    """
    Write a package file (header plus rows) as UTF-8 with BOM.

    Args:
        path: Destination file
        header: Column names
        rows: Data records
        separator: Field separator

    Returns:
        Number of data records written
    """
    rows = list(rows)
    content = write_records([list(header)] + [list(r) for r in rows], separator)
    path = Path(path)
    # newline="" keeps the CRLF terminators untouched on every platform
    with open(path, "w", encoding=FILE_ENCODING, newline="") as f:
        f.write(content)
    return len(rows)


def read_csv_file(path: Path, separator: str = PACKAGE_SEPARATOR) -> Optional[CsvTable]:
    """
    Read a package file.

    Args:
        path: File to read
        separator: Field separator

    Returns:
        CsvTable with the first record as header, or None if the file does
        not exist. An empty file yields a table without header or records.
    """
    path = Path(path)
    if not path.is_file():
        return None

    with open(path, "r", encoding=FILE_ENCODING, newline="") as f:
        text = f.read()

    all_records = read_records(text, separator)
    if not all_records:
        return CsvTable([], [])
    return CsvTable(all_records[0], all_records[1:])
