"""Strict parsing and formatting of DD/MM/YYYY calendar dates."""

import re
from datetime import date, datetime
from typing import Any, Optional

DATE_FORMAT = "%d/%m/%Y"
DATE_FORMAT_HINT = "dd/mm/yyyy"
MISSING = "---"

_STRICT_PATTERN = re.compile(r"^[0-9]{2}/[0-9]{2}/[0-9]{4}$")


def parse_strict_date(text: Any) -> Optional[date]:
    """
    Convert user input "31/01/2026" to a date.

    Returns None for anything that is not a real calendar date in exactly
    the DD/MM/YYYY form (no single-digit parts, no other separators).
    """
    if not isinstance(text, str) or not _STRICT_PATTERN.match(text):
        return None
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


def unwrap_date(value: Any) -> Optional[date]:
    """Reduce a store timestamp, datetime or date to a plain date."""
    if value is None:
        return None
    if hasattr(value, "to_date"):
        value = value.to_date()
    if isinstance(value, datetime):
        return value.date()
    return value


def format_date(value: Any) -> str:
    """Format a date or store timestamp as DD/MM/YYYY ("---" when absent)."""
    day = unwrap_date(value)
    if day is None:
        return MISSING
    return f"{day.day:02d}/{day.month:02d}/{day.year:04d}"
