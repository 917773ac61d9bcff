"""Amount parsing utilities."""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

# Longest leading float literal, e.g. "12.5" out of "12.5.3" or "12-4".
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_NON_NUMERIC = re.compile(r"[^0-9.+-]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "₹1,23,456.78"
    - "$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥₹]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return -amount if is_negative else amount


def coerce_cell_amount(value: Any) -> Optional[Decimal]:
    """Coerce a spreadsheet cell to a Decimal, or None when it holds no number.

    Native ints and floats pass through. Strings are stripped of every
    character other than digits, ".", "+" and "-", and the leading number
    of what remains is used, so "₹1,200.50 CR" reads as 1200.50. Booleans,
    dates, and non-finite floats are not amounts.

    Args:
        value: Raw cell value from the spreadsheet codec

    Returns:
        Decimal amount, or None if the cell is empty or not numeric
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return Decimal(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return Decimal(str(value))

    if isinstance(value, Decimal):
        return value if value.is_finite() else None

    if isinstance(value, str):
        cleaned = _NON_NUMERIC.sub("", value)
        match = _LEADING_NUMBER.match(cleaned)
        if match is None:
            return None
        return Decimal(match.group(0))

    return None
