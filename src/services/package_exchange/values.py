"""
Cell value parsing and formatting for migration package files.

Formatting is culture-invariant and canonical so that two exports of the
same data are byte-identical: decimals without trailing zeros ("12.5"),
ISO dates ("2024-03-01"), booleans as "1"/"0".

Parsing is lenient about what people type into spreadsheets: Italian
decimals ("1.234,56"), comma decimal separators ("12,5"), Italian dates
("01/03/2024") and S/SI/N/NO booleans. Parsers are only called on non-blank
cells and raise ValueError when a cell cannot be read.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

# Value kinds used by field descriptors
TEXT = "text"
DECIMAL = "decimal"
INTEGER = "int"
BOOLEAN = "bool"
DATE = "date"

_TRUE_WORDS = {"1", "true", "s", "si", "sì"}
_FALSE_WORDS = {"0", "false", "n", "no"}

_DAY_FIRST_FORMATS = (
    "%d/%m/%Y",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%d-%m-%Y",
    "%d.%m.%Y",
)


# ============================================================================
# Formatting
# ============================================================================


def format_decimal(value: Any) -> Optional[str]:
    """
    Format a number in invariant notation without trailing zeros.

    Example:
        >>> format_decimal(Decimal("12.5000"))
        '12.5'
        >>> format_decimal(Decimal("100"))
        '100'
    """
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    if value == 0:
        return "0"
    # "f" avoids scientific notation after normalize() (1E+2 -> "100")
    return format(value.normalize(), "f")


def format_date(value: Any) -> Optional[str]:
    """Format a date (or the date part of a datetime) as YYYY-MM-DD."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def format_bool(value: Any) -> Optional[str]:
    """Format a boolean as "1" or "0"."""
    if value is None:
        return None
    return "1" if value else "0"


def format_int(value: Any) -> Optional[str]:
    """Format an integer in plain notation."""
    if value is None:
        return None
    return str(int(value))


def format_text(value: Any) -> Optional[str]:
    """Text is written as-is."""
    if value is None:
        return None
    return str(value)


_FORMATTERS = {
    TEXT: format_text,
    DECIMAL: format_decimal,
    INTEGER: format_int,
    BOOLEAN: format_bool,
    DATE: format_date,
}


def format_value(kind: str, value: Any) -> Optional[str]:
    """Format a model value for a package cell according to its kind."""
    return _FORMATTERS[kind](value)


# ============================================================================
# Parsing
# ============================================================================


def parse_decimal(raw: str) -> Decimal:
    """
    Parse a decimal written in invariant or Italian notation.

    The rightmost of '.' and ',' is the decimal separator when both occur;
    a single ',' is a decimal separator; repeated separators of one kind are
    thousands separators.

    Example:
        >>> parse_decimal("1.234,56")
        Decimal('1234.56')
        >>> parse_decimal("12,5")
        Decimal('12.5')

    Raises:
        ValueError: If the text is not a finite number
    """
    s = raw.strip().replace(" ", "")
    if "." in s and "," in s:
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif "," in s:
        s = s.replace(",", ".") if s.count(",") == 1 else s.replace(",", "")
    elif s.count(".") > 1:
        s = s.replace(".", "")

    try:
        value = Decimal(s)
    except InvalidOperation:
        raise ValueError(f"Invalid decimal: {raw!r}")
    if not value.is_finite():
        raise ValueError(f"Invalid decimal: {raw!r}")
    return value


def parse_int(raw: str) -> int:
    """
    Parse an integer.

    Raises:
        ValueError: If the text is not an integer
    """
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid integer: {raw!r}")


def parse_bool(raw: str) -> bool:
    """
    Parse a boolean: true/false, 1/0, S/SI/N/NO in any case.

    Raises:
        ValueError: If the text is not a recognized boolean
    """
    s = raw.strip().casefold()
    if s in _TRUE_WORDS:
        return True
    if s in _FALSE_WORDS:
        return False
    raise ValueError(f"Invalid boolean: {raw!r}")


def parse_date(raw: str) -> date:
    """
    Parse a date.

    Accepts ISO dates, ISO datetimes (time part dropped) and day-first
    Italian dates such as 31/12/2024.

    Raises:
        ValueError: If the text is not a recognized date
    """
    s = raw.strip()
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass

    try:
        # Handle ISO format with time, "Z" suffix included
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _DAY_FIRST_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Invalid date: {raw!r}")


def parse_text(raw: str) -> str:
    """Text cells are used trimmed."""
    return raw.strip()


_PARSERS = {
    TEXT: parse_text,
    DECIMAL: parse_decimal,
    INTEGER: parse_int,
    BOOLEAN: parse_bool,
    DATE: parse_date,
}


def parse_value(kind: str, raw: Optional[str]) -> Any:
    """
    Parse a package cell according to its kind.

    Returns None for blank cells; raises ValueError for unreadable ones.
    """
    if raw is None or not raw.strip():
        return None
    return _PARSERS[kind](raw)


# ============================================================================
# Fingerprint normalization
# ============================================================================


def fingerprint_part(value: Any) -> str:
    """
    Canonical text for one fingerprint component.

    Model values and freshly parsed cell values of the same data produce the
    same text: IDs and integers plainly, decimals without trailing zeros,
    dates in ISO form, booleans as 1/0, text trimmed. None becomes "".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return format_bool(value)
    if isinstance(value, (Decimal, float)):
        return format_decimal(value)
    if isinstance(value, (date, datetime)):
        return format_date(value)
    return str(value).strip()
