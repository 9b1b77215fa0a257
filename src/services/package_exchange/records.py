"""
Normalized record view over package CSV rows.

Column lookup is tolerant of the way spreadsheets and people mangle headers:
"Ragione Sociale", "ragione_sociale" and "RAGIONE-SOCIALE" all find the
"RagioneSociale" column, and Italian accented vowels are folded ("Città"
matches "Citta").
"""

from typing import Dict, Iterator, List, Optional, Sequence

_ACCENT_FOLD = str.maketrans(
    {
        "à": "a",
        "À": "a",
        "è": "e",
        "È": "e",
        "é": "e",
        "É": "e",
        "ì": "i",
        "Ì": "i",
        "ò": "o",
        "Ò": "o",
        "ù": "u",
        "Ù": "u",
    }
)


def normalize_header(name: Optional[str]) -> str:
    """
    Normalize a column name for lookup.

    Trims, drops spaces, underscores and hyphens, folds accented vowels and
    lowercases. Blank names normalize to "".

    Example:
        >>> normalize_header(" Ragione_Sociale ")
        'ragionesociale'
        >>> normalize_header("Città")
        'citta'
    """
    if name is None:
        return ""
    s = name.strip()
    if not s:
        return ""
    for ch in ("_", " ", "-"):
        s = s.replace(ch, "")
    return s.translate(_ACCENT_FOLD).casefold()


class HeaderMap:
    """Maps normalized column names to column positions.

    The first occurrence of a name wins; blank header cells are ignored.
    """

    def __init__(self, header: Sequence[str]):
        self._index: Dict[str, int] = {}
        for position, raw in enumerate(header):
            key = normalize_header(raw)
            if not key:
                continue
            self._index.setdefault(key, position)

    def position(self, name: str) -> Optional[int]:
        """Column position of name, or None when the column is absent."""
        return self._index.get(normalize_header(name))

    def __contains__(self, name: str) -> bool:
        return self.position(name) is not None

    def __len__(self) -> int:
        return len(self._index)


class Record:
    """One data row read through a HeaderMap."""

    def __init__(self, header_map: HeaderMap, values: Sequence[str], row_number: int = 0):
        self._header_map = header_map
        self._values = values
        self.row_number = row_number

    def get(self, *aliases: str) -> Optional[str]:
        """
        Trimmed value of the first alias present in the header.

        Returns None when no alias is a column of the file, when the row is
        shorter than the column position, or when the value is blank.
        """
        for alias in aliases:
            position = self._header_map.position(alias)
            if position is None or position >= len(self._values):
                continue
            value = self._values[position]
            if value is None:
                return None
            value = value.strip()
            return value or None
        return None

    @property
    def values(self) -> List[str]:
        """Raw field values."""
        return list(self._values)

    def __repr__(self) -> str:
        return f"Record(row_number={self.row_number}, values={list(self._values)!r})"


class CsvTable:
    """A parsed package file: header row plus data records."""

    def __init__(self, header: Sequence[str], rows: Sequence[Sequence[str]]):
        self.header = list(header)
        self.rows = [list(r) for r in rows]
        self.header_map = HeaderMap(self.header)

    def records(self) -> Iterator[Record]:
        """Yield data rows as Record views; row numbers start at 2 (after the header)."""
        for offset, values in enumerate(self.rows, start=2):
            yield Record(self.header_map, values, offset)

    def __len__(self) -> int:
        return len(self.rows)
