"""
Field Coercion

Converts the raw strings typed into a charging record into typed values
and back to display strings:
- Money amounts with currency symbols and separators
- Yes/no flags
- Time of day (HH:MM)
- Decimals, where "invalid" is distinct from zero
- Dates

None of these functions raise; each returns a best-effort value or its
designated empty representation.
"""

import math
import re
from datetime import date, datetime
from typing import NamedTuple, Optional

from .constants import DATE_FORMATS, MINUTES_PER_HOUR, TRUTHY_FLAGS

_NON_MONEY_CHARS = re.compile(r"[^0-9.\-]")


class TimeOfDay(NamedTuple):
    """Wall-clock time as entered; hour is not range checked."""

    hour: int
    minute: int

    def total_minutes(self) -> int:
        return self.hour * MINUTES_PER_HOUR + self.minute


def _as_text(raw) -> str:
    if raw is None:
        return ""
    return str(raw)


def parse_money(raw) -> float:
    """
    Parse a money amount, ignoring currency symbols and separators.

    Args:
        raw: User-entered amount

    Returns:
        Amount as float, 0.0 if nothing parseable remains

    Examples:
        >>> parse_money("$1,234.56")
        1234.56
        >>> parse_money("abc")
        0.0
    """
    cleaned = _NON_MONEY_CHARS.sub("", _as_text(raw))
    if not cleaned:
        return 0.0
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def parse_flag(raw) -> bool:
    """
    Parse a textual yes/no flag.

    Examples:
        >>> parse_flag("YES ")
        True
        >>> parse_flag("no")
        False
    """
    return _as_text(raw).strip().lower() in TRUTHY_FLAGS


def parse_time_of_day(raw) -> Optional[TimeOfDay]:
    """
    Parse a 24-hour HH:MM time.

    A trailing seconds component (HH:MM:SS) is accepted and ignored.
    Hours of 24 or more are not rejected; they simply count as more minutes.

    Returns:
        TimeOfDay, or None if the value is not HH:MM

    Examples:
        >>> parse_time_of_day("22:05")
        TimeOfDay(hour=22, minute=5)
        >>> parse_time_of_day("10am") is None
        True
    """
    parts = _as_text(raw).strip().split(":")
    if len(parts) not in (2, 3):
        return None
    parts = [p.strip() for p in parts]
    if not all(p.isascii() and p.isdigit() for p in parts):
        return None
    return TimeOfDay(int(parts[0]), int(parts[1]))


def parse_decimal(raw) -> Optional[float]:
    """
    Parse a decimal number.

    Unlike parse_money, an unparseable value yields None rather than 0 so
    callers can tell "invalid" apart from "zero" before dividing by it.

    Examples:
        >>> parse_decimal(" 12.5 ")
        12.5
        >>> parse_decimal("") is None
        True
    """
    text = _as_text(raw).strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_date(raw) -> Optional[date]:
    """Parse the Date field in any of the accepted formats, None if unrecognised."""
    text = _as_text(raw).strip()
    if not text:
        return None

    # ISO datetimes ("2024-01-31T08:00") keep only the date part
    if "T" in text and text[:4].isdigit():
        text = text.split("T", 1)[0]

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def format_decimal(value: Optional[float], places: int) -> str:
    """Format a number for display, empty string for None."""
    if value is None:
        return ""
    text = f"{value:.{places}f}"
    # Avoid "-0.00" for tiny negative results
    if float(text) == 0:
        text = f"{0:.{places}f}"
    return text


def format_minutes(total_minutes: int) -> str:
    """
    Format a minute count as H:MM.

    Examples:
        >>> format_minutes(510)
        '8:30'
    """
    hours, minutes = divmod(total_minutes, MINUTES_PER_HOUR)
    return f"{hours}:{minutes:02d}"
