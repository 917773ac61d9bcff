"""Month/year label parsing utilities."""

import re
from datetime import date, datetime
from typing import Any, Optional

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

MONTH_ABBREVIATIONS = {name[:3].upper(): index for index, name in enumerate(MONTHS, start=1)}
MONTH_NAMES = {name.upper(): index for index, name in enumerate(MONTHS, start=1)}

_LEADING_DIGITS = re.compile(r"\d+")


def parse_month_year(value: Any) -> Optional[tuple[int, int]]:
    """Parse a payslip period cell into (month, year).

    Accepts "<month> <year>" where month is a 3-letter abbreviation or a
    full English month name (case-insensitive), e.g. "JAN 2025" or
    "january 2025". Date cells yield their own month and year.

    Args:
        value: Cell value

    Returns:
        Tuple of (month, year), or None if the value cannot be parsed
    """
    if isinstance(value, (datetime, date)):
        return (value.month, value.year)

    parts = str(value).strip().split()
    if len(parts) != 2:
        return None

    month_token, year_token = parts
    token = month_token.upper()
    month = MONTH_ABBREVIATIONS.get(token) or MONTH_NAMES.get(token)
    if month is None:
        return None

    match = _LEADING_DIGITS.match(year_token)
    if match is None:
        return None

    return (month, int(match.group(0)))


def format_month_year(month: int, year: int) -> str:
    """Format a period as the spreadsheet label, e.g. "JAN 2025"."""
    return f"{MONTHS[month - 1][:3].upper()} {year}"


def financial_year_label(month: int, year: int) -> str:
    """Return the April-March financial year label for a period.

    Examples:
        financial_year_label(4, 2024) -> "FY 2024-25"
        financial_year_label(3, 2025) -> "FY 2024-25"
    """
    if month >= 4:
        return f"FY {year}-{str(year + 1)[2:]}"
    return f"FY {year - 1}-{str(year)[2:]}"


def financial_year_start(label: str) -> int:
    """Return the starting calendar year of a financial year label, or 0."""
    match = re.match(r"FY\s+(\d{4})", label.strip())
    return int(match.group(1)) if match else 0
